"""OpenAPI 文档解析 / OpenAPI Document Loader

把 OpenAPI 文档中的每个操作转换为一个 Action。
Turns every operation of an OpenAPI document into an Action.
"""

import json
import re
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Tuple, Union

from pydash import get as pg
import yaml

from actionflow.utils.log import logger

from .model import Action, ActionParameter, SUPPORTED_METHODS

_SERVER_VARIABLE_RE = re.compile(r"\{([^{}]+)\}")

SchemaSource = Union[str, bytes, Dict[str, Any]]


def parse_schema(source: SchemaSource) -> Dict[str, Any]:
    """把字典、JSON 或 YAML 文本解析为文档对象

    Raises:
        ValueError: 内容为空、无法解析或顶层不是对象
    """
    if isinstance(source, dict):
        return source

    text = source.decode("utf-8") if isinstance(source, bytes) else source
    if not text or not text.strip():
        raise ValueError("OpenAPI schema detail is required.")

    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid OpenAPI schema content: {e}") from e

    if not isinstance(document, dict):
        raise ValueError("OpenAPI schema must be an object.")
    return document


def _pointer_parts(ref: str) -> List[str]:
    return [
        part.replace("~1", "/").replace("~0", "~")
        for part in ref[2:].split("/")
    ]


def expand_refs(
    node: Any, root: Dict[str, Any], active: FrozenSet[str] = frozenset()
) -> Any:
    """返回展开了本地 $ref 的副本 / Copy of node with local $refs inlined

    只处理 "#/" 开头的引用; 外部引用、找不到的引用以及循环引用保持原样。
    与 $ref 并列的键会覆盖被引用对象中的同名键。
    Sibling keys next to a $ref override the referenced object's keys.
    """
    if isinstance(node, list):
        return [expand_refs(item, root, active) for item in node]
    if not isinstance(node, dict):
        return node

    ref = node.get("$ref")
    if isinstance(ref, str) and ref.startswith("#/") and ref not in active:
        target = pg(root, _pointer_parts(ref))
        if target is not None:
            resolved = expand_refs(target, root, active | {ref})
            siblings = {k: v for k, v in node.items() if k != "$ref"}
            if isinstance(resolved, dict):
                return {**resolved, **expand_refs(siblings, root, active)}
            return resolved
        logger.debug("unresolved $ref left in place: %s", ref)

    return {key: expand_refs(value, root, active) for key, value in node.items()}


def server_url(servers: Any) -> Optional[str]:
    """第一个可用 server 的 URL, 变量替换为默认值

    First usable server URL with its variables replaced by their defaults.
    """
    if isinstance(servers, (dict, str)):
        servers = [servers]
    if not isinstance(servers, list):
        return None

    for server in servers:
        if isinstance(server, str) and server:
            return server
        url = pg(server, "url") if isinstance(server, dict) else None
        if not url:
            continue
        variables = server.get("variables") or {}

        def substitute(match: "re.Match[str]") -> str:
            default = pg(variables, [match.group(1), "default"])
            return match.group(0) if default is None else str(default)

        return _SERVER_VARIABLE_RE.sub(substitute, url)
    return None


def merge_parameters(
    path_level: Any, operation_level: Any
) -> List[ActionParameter]:
    """合并路径级与操作级参数 / Merge path-item and operation parameters

    参数以 (name, in) 唯一标识; 操作级声明覆盖同名的路径级声明,
    并保留其首次出现的位置。
    Parameters are keyed by (name, in). An operation-level declaration
    replaces the path-level one in place.
    """
    merged: Dict[Tuple[str, str], ActionParameter] = {}
    for declared in (path_level, operation_level):
        if not isinstance(declared, list):
            continue
        for raw in declared:
            if not isinstance(raw, dict) or not raw.get("name"):
                continue
            if not raw.get("in"):
                continue
            param = ActionParameter.model_validate(raw)
            merged[(param.name, param.in_)] = param
    return list(merged.values())


class OpenAPIDocument:
    """OpenAPI schema based action source.

    Examples:
        >>> doc = OpenAPIDocument(open("petstore.yaml").read())
        >>> [action.name for action in doc.actions()]
        ['listPets', 'createPet']
    """

    def __init__(
        self,
        schema: SchemaSource,
        api_host: Optional[str] = None,
    ):
        raw = parse_schema(schema)
        self._schema: Dict[str, Any] = expand_refs(raw, raw)
        self._api_host_override = api_host
        self._default_host = server_url(self._schema.get("servers"))

    @property
    def schema(self) -> Dict[str, Any]:
        return self._schema

    @property
    def api_host(self) -> Optional[str]:
        return self._api_host_override or self._default_host

    def _operations(self) -> Iterator[Tuple[str, str, Dict[str, Any], Dict]]:
        paths = self._schema.get("paths")
        if not isinstance(paths, dict):
            return
        for path, path_item in paths.items():
            if not isinstance(path_item, dict):
                continue
            for key, operation in path_item.items():
                method = key.upper()
                if method in SUPPORTED_METHODS and isinstance(operation, dict):
                    yield path, method, operation, path_item

    def _host_for(self, operation: Dict, path_item: Dict) -> Optional[str]:
        if self._api_host_override:
            return self._api_host_override
        return (
            server_url(operation.get("servers"))
            or server_url(path_item.get("servers"))
            or self._default_host
        )

    def to_action(
        self,
        path: str,
        method: str,
        operation: Dict[str, Any],
        path_item: Dict[str, Any],
        auth_header: str = "Authorization",
        auth_scheme: Optional[str] = None,
    ) -> Action:
        """把单个操作转换为 Action / Build the Action for one operation"""
        return Action(
            name=operation.get("operationId") or f"{method} {path}",
            description=operation.get("description")
            or operation.get("summary"),
            path=path,
            request_method=method,
            api_host=self._host_for(operation, path_item),
            parameters=merge_parameters(
                path_item.get("parameters"), operation.get("parameters")
            ),
            request_body_contents=pg(operation, "requestBody.content"),
            auth_header=auth_header,
            auth_scheme=auth_scheme,
        )

    def actions(
        self,
        auth_header: str = "Authorization",
        auth_scheme: Optional[str] = None,
    ) -> List[Action]:
        """每个受支持的操作生成一个 Action / One Action per supported operation"""
        return [
            self.to_action(
                path,
                method,
                operation,
                path_item,
                auth_header=auth_header,
                auth_scheme=auth_scheme,
            )
            for path, method, operation, path_item in self._operations()
        ]


def load_actions(
    schema: SchemaSource,
    api_host: Optional[str] = None,
    auth_header: str = "Authorization",
    auth_scheme: Optional[str] = None,
) -> List[Action]:
    """从 OpenAPI 文档加载 Action 列表 / Load actions from an OpenAPI document

    Args:
        schema: OpenAPI 文档 (字典、JSON 或 YAML 字符串)
        api_host: 覆盖文档中的 servers / Overrides the document servers
        auth_header: 认证请求头名称 / Auth header name
        auth_scheme: 认证前缀,例如 Bearer / Auth scheme prefix such as Bearer
    """
    return OpenAPIDocument(schema, api_host=api_host).actions(
        auth_header=auth_header, auth_scheme=auth_scheme
    )
