"""响应后处理 / Output Post-Processor

对数组去重,并按 action 配置的 keys_to_keep 过滤字段。
Deduplicates array responses and projects them onto an allow-list of keys.
"""

import json
from typing import Any, List, Sequence

from actionflow.utils.model import JSONValue

from .model import Action


def _canonical(value: Any) -> Any:
    # 1 与 1.0 视为同一个数
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {k: _canonical(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_canonical(v) for v in value]
    return value


def _fingerprint(value: Any) -> str:
    return json.dumps(_canonical(value), sort_keys=True, default=str)


def deduplicate_array(items: Sequence[JSONValue]) -> List[JSONValue]:
    """按结构相等去重,保留首次出现的顺序

    Structural (deep) equality; first-occurrence order is preserved.
    """
    seen = set()
    out: List[JSONValue] = []
    for item in items:
        key = _fingerprint(item)
        if key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out


def filter_keys(obj: JSONValue, keys_to_keep: Sequence[str]) -> JSONValue:
    """只保留指定的对象键,其他结构不变

    - 列表逐个元素处理; 过滤后变为空对象的记录被移除
    - 保留键的值原样保留
    - 未保留键下的对象或列表继续递归, 仍有内容时保留
    - 未保留键下的标量被丢弃
    """
    if isinstance(obj, list):
        filtered = []
        for item in obj:
            kept = filter_keys(item, keys_to_keep)
            if isinstance(item, dict) and item and not kept:
                continue
            filtered.append(kept)
        return filtered
    if not isinstance(obj, dict):
        return obj

    out = {}
    for key, value in obj.items():
        if key in keys_to_keep:
            out[key] = value
        elif isinstance(value, (dict, list)):
            nested = filter_keys(value, keys_to_keep)
            if _has_content(nested):
                out[key] = nested
    return out


def _has_content(value: JSONValue) -> bool:
    if isinstance(value, dict):
        return bool(value)
    if isinstance(value, list):
        return any(
            isinstance(item, (dict, list)) and _has_content(item)
            for item in value
        )
    return False


def process_api_output(out: JSONValue, action: Action) -> JSONValue:
    """去重并过滤 API 输出 / Deduplicate and filter an API response"""
    if isinstance(out, list):
        out = deduplicate_array(out)

    keys = action.keys_to_keep
    if isinstance(keys, list) and all(isinstance(k, str) for k in keys):
        out = filter_keys(out, keys)
    return out
