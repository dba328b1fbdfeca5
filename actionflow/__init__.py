"""actionflow

actionflow 把 OpenAPI 描述的 action 转换为真实的 HTTP 请求,执行后把响应整理成
适合语言模型使用的 JSON 值,并在发送给模型前匿名化其中的标识符。
actionflow turns OpenAPI-described actions into real HTTP requests, executes
them, normalizes the responses into JSON values suited to a language model,
and anonymizes identifiers before they are shown to the model.

主要功能 / Main Features:
- Request: 请求构建 / Request construction
- Executor: 请求执行与响应规范化 / Execution and response normalization
- Identifiers: 标识符匿名化 / Identifier anonymization
- OpenAPI: 从 OpenAPI 文档加载 action / Loading actions from OpenAPI documents
"""

__version__ = "0.1.0"

from actionflow.action import (
    Action,
    ActionParameter,
    ActionResult,
    ActionRunner,
    construct_http_request,
    load_actions,
    make_http_request,
    make_http_request_async,
    Organization,
    process_api_output,
    re_add_ids,
    remove_ids,
    RequestOptions,
)
from actionflow.utils.config import Config
from actionflow.utils.exception import (
    ActionConfigError,
    ActionFlowError,
    ClientError,
    HTTPError,
    ResponseParseError,
)

__all__ = [
    "Action",
    "ActionParameter",
    "ActionResult",
    "ActionRunner",
    "Organization",
    "RequestOptions",
    "construct_http_request",
    "make_http_request",
    "make_http_request_async",
    "process_api_output",
    "remove_ids",
    "re_add_ids",
    "load_actions",
    "Config",
    "ActionFlowError",
    "ActionConfigError",
    "HTTPError",
    "ClientError",
    "ResponseParseError",
]
