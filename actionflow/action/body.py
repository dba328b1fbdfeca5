"""请求体构建 / Schema-Driven Body Builder

根据 OpenAPI 请求体 schema 和扁平的参数表构建 JSON 请求体。
Builds a JSON request body from an OpenAPI request-body schema and a flat
parameter map.
"""

from typing import Any, Dict, Mapping, Optional

from pydash import get as pg

from actionflow.utils.exception import ActionConfigError
from actionflow.utils.helper import is_truthy
from actionflow.utils.log import logger

JSON_MIME_TYPE = "application/json"


def get_json_mime_type(
    request_body_contents: Optional[Mapping[str, Any]],
) -> Optional[Dict[str, Any]]:
    """取出 application/json 对应的媒体类型对象

    "application/json; charset=utf-8" 这样带参数的写法也会被识别。
    Media types carrying parameters such as a charset are matched as well.
    """
    if not isinstance(request_body_contents, Mapping):
        return None
    for media_type, media_object in request_body_contents.items():
        base = str(media_type).split(";", 1)[0].strip().lower()
        if base == JSON_MIME_TYPE and isinstance(media_object, dict):
            return media_object
    return None


def body_properties_from_request_body_contents(
    request_body_contents: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    """返回 JSON 请求体的 schema / Return the JSON schema of the request body

    Raises:
        ActionConfigError: 未声明 application/json 时 / When no JSON media type is declared
    """
    logger.debug("request body contents: %s", request_body_contents)

    application_json = get_json_mime_type(request_body_contents)
    if application_json is None:
        raise ActionConfigError(
            "Only application/json request body contents are supported",
            field="request_body_contents",
        )

    return application_json.get("schema") or {}


def fill_no_choice_required_params(
    parameters: Mapping[str, Any], schema: Mapping[str, Any]
) -> Dict[str, Any]:
    """为只有一个可选值的必填属性填入该值

    Required properties whose enum has exactly one value are forced to it.
    """
    out = dict(parameters)
    required = pg(schema, "required") or []
    properties = pg(schema, "properties") or {}
    for name in required:
        enum = pg(properties, [name, "enum"])
        if isinstance(enum, list) and len(enum) == 1:
            out[name] = enum[0]
    return out


def build_body(
    schema: Mapping[str, Any],
    parameters: Mapping[str, Any],
    keep_falsy: bool = False,
) -> Dict[str, Any]:
    """按 schema 的顶层属性组装请求体

    - readOnly 属性总是被丢弃
    - 没有提供值的属性被省略; 默认情况下 0、False、"" 也视为未提供
    - keep_falsy=True 时只有缺失或 None 的值被省略

    Args:
        schema: 请求体 JSON schema / Request body JSON schema
        parameters: 参数表 / Parameter map
        keep_falsy: 是否保留 0/False/"" / Keep 0, False and ""

    Returns:
        请求体字典 / The body object
    """
    properties = pg(schema, "properties") or {}
    logger.debug("body properties: %s", list(properties))

    body: Dict[str, Any] = {}
    for name, prop in properties.items():
        if isinstance(prop, dict) and prop.get("readOnly"):
            continue
        value = parameters.get(name)
        supplied = value is not None if keep_falsy else is_truthy(value)
        if supplied:
            body[name] = value
    return body
