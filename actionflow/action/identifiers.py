"""标识符匿名化 / Identifier Codec

在任意 JSON 中把标识符(UUID、哈希等)替换为 ID1、ID2 这样的短标记,
并在之后根据查找表恢复原值。
Replaces identifiers (UUIDs, hashes, ...) anywhere inside arbitrary JSON with
short ID1, ID2 tokens so they can be shown to a language model, and maps the
tokens back afterwards using the returned lookup table.
"""

from copy import deepcopy
import re
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from actionflow.utils.helper import swap_keys_values
from actionflow.utils.model import JSONValue

IdPredicate = Callable[[str], bool]

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_OPAQUE_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]{20,}$")
_TOKEN_RE = re.compile(r"^ID([1-9][0-9]*)$")
_SEPARATOR_RE = re.compile(r"[_-]+")


def is_id(value: str) -> bool:
    """判断字符串是否形如标识符 / Whether a string looks like a real-world identifier

    UUID 以及至少 20 位、同时包含字母和数字的不透明令牌视为标识符。
    UUIDs, and opaque tokens of 20+ characters mixing letters and digits, count.
    由单词和数字拼成的可读名称 (如 plan_2024_pro) 不算。
    Readable slugs made of whole words and numbers do not.

    Examples:
        >>> is_id("5f1b2c4e-8a3d-4c55-9a3e-0c1f2b3a4d5e")
        True
        >>> is_id("customer")
        False
        >>> is_id("subscription_plan_2024_pro")
        False
    """
    if not isinstance(value, str) or not value:
        return False
    if _UUID_RE.match(value):
        return True
    if _OPAQUE_TOKEN_RE.match(value):
        return (
            any(c.isdigit() for c in value)
            and any(c.isalpha() for c in value)
            and not _is_readable_slug(value)
        )
    return False


def _is_readable_slug(value: str) -> bool:
    """由纯单词或纯数字片段组成, 如 subscription_plan_2024_pro"""
    segments = [s for s in _SEPARATOR_RE.split(value) if s]
    return all(s.isdigit() or s.isalpha() for s in segments)


def _entries(node: Any) -> Iterator[Tuple[Any, Any]]:
    """为对象和数组生成统一的 (键, 值) 视图 / Ordered key->value view for dicts and lists"""
    if isinstance(node, dict):
        return iter(list(node.items()))
    if isinstance(node, list):
        return iter(list(enumerate(node)))
    return iter(())


def _map_strings(node: Any, replace: Callable[[str], str]) -> None:
    """就地替换容器中的所有字符串叶子 / Rewrite every string leaf of a container in place

    含 "/" 的字符串按路径段分别处理后再拼接。
    Strings containing "/" are handled segment by segment and rejoined.
    """
    for key, value in _entries(node):
        if isinstance(value, (dict, list)):
            _map_strings(value, replace)
        elif isinstance(value, str):
            if "/" in value:
                node[key] = "/".join(replace(part) for part in value.split("/"))
            else:
                node[key] = replace(value)


def _next_index(store: Dict[str, str]) -> int:
    """已有查找表中最大的标记序号 / Highest ID<n> index already present in a store"""
    indices = [0]
    for token in store.values():
        match = _TOKEN_RE.match(token)
        if match:
            indices.append(int(match.group(1)))
    return max(indices)


def remove_ids(
    obj: JSONValue,
    existing_store: Optional[Dict[str, str]] = None,
    is_id: IdPredicate = is_id,
) -> Tuple[JSONValue, Dict[str, str]]:
    """移除 JSON 中的标识符 / Remove identifiers from arbitrary JSON

    Args:
        obj: 任意 JSON 值 / Any JSON value
        existing_store: 需要扩展的已有查找表 / Lookup table to extend
        is_id: 标识符判定函数 / Predicate deciding what is an identifier

    Returns:
        (清理后的对象, 原标识符 -> 标记 的查找表)
        (cleaned object, lookup table from original identifier to token)

    相同的标识符总是映射到同一个标记; 输入对象和已有查找表都不会被修改。
    Repeated identifiers reuse one token; neither the input nor the existing
    store is mutated.
    """
    store: Dict[str, str] = dict(existing_store or {})
    counter = _next_index(store)

    def get_or_generate(value: str) -> str:
        nonlocal counter
        if not is_id(value):
            return value
        token = store.get(value)
        if token is None:
            counter += 1
            token = f"ID{counter}"
            store[value] = token
        return token

    if isinstance(obj, str):
        holder = [obj]
        _map_strings(holder, get_or_generate)
        return holder[0], store

    cleaned = deepcopy(obj)
    _map_strings(cleaned, get_or_generate)
    return cleaned, store


def re_add_ids(obj: JSONValue, id_store: Dict[str, str]) -> JSONValue:
    """把 remove_ids 生成的标记替换回原始标识符 / Put the original identifiers back

    未知的标记保持原样。
    Tokens missing from the store are left untouched.
    """
    lookup = swap_keys_values(id_store or {})

    def restore(value: str) -> str:
        return lookup.get(value, value)

    if isinstance(obj, str):
        holder = [obj]
        _map_strings(holder, restore)
        return holder[0]

    restored = deepcopy(obj)
    _map_strings(restored, restore)
    return restored
