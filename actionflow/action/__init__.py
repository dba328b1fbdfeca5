"""Action 模块 / Action Module

把 OpenAPI 描述的 action 转换为 HTTP 请求、执行并规范化响应。
Turns OpenAPI-described actions into HTTP requests, executes them and
normalizes the responses.
"""

from .body import (
    body_properties_from_request_body_contents,
    build_body,
    fill_no_choice_required_params,
    get_json_mime_type,
)
from .executor import make_http_request, make_http_request_async
from .identifiers import is_id, re_add_ids, remove_ids
from .model import (
    Action,
    ActionParameter,
    ActionResult,
    DebugEvent,
    Organization,
    ParameterLocation,
    RequestMethod,
    RequestOptions,
)
from .openapi import load_actions, OpenAPIDocument
from .postprocess import deduplicate_array, filter_keys, process_api_output
from .request import construct_http_request
from .runner import ActionRunner

__all__ = [
    "Action",
    "ActionParameter",
    "ActionResult",
    "ActionRunner",
    "DebugEvent",
    "Organization",
    "ParameterLocation",
    "RequestMethod",
    "RequestOptions",
    "OpenAPIDocument",
    "load_actions",
    "construct_http_request",
    "make_http_request",
    "make_http_request_async",
    "process_api_output",
    "deduplicate_array",
    "filter_keys",
    "build_body",
    "body_properties_from_request_body_contents",
    "fill_no_choice_required_params",
    "get_json_mime_type",
    "is_id",
    "remove_ids",
    "re_add_ids",
]
