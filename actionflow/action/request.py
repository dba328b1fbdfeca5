"""请求构建 / Request Constructor

把 action 描述与运行时参数转换为完整的 URL 和请求选项,不发起任何网络请求。
Turns an action descriptor and runtime parameters into a full URL plus request
options. No network call is made here.
"""

import json
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import quote, urlencode

from actionflow.utils.config import Config
from actionflow.utils.exception import ActionConfigError
from actionflow.utils.helper import is_truthy, mask_password, stringify
from actionflow.utils.log import logger

from .body import (
    body_properties_from_request_body_contents,
    build_body,
    fill_no_choice_required_params,
)
from .model import (
    Action,
    ActionParameter,
    Organization,
    ParameterLocation,
    RequestOptions,
    StreamCallback,
    SUPPORTED_METHODS,
)

# encodeURIComponent 不编码的字符
_URI_COMPONENT_SAFE = "!~*'()"


def _check_action(action: Action) -> str:
    if not action.path:
        raise ActionConfigError("Path is not provided", field="path")
    if not action.request_method:
        raise ActionConfigError(
            "Request method is not provided", field="request_method"
        )
    if not action.api_host:
        raise ActionConfigError(
            "API host has not been provided", field="api_host"
        )

    method = action.request_method.upper()
    if method not in SUPPORTED_METHODS:
        raise ActionConfigError(
            f"Request method {action.request_method} is not supported",
            field="request_method",
        )
    return method


def _build_headers(
    action: Action,
    organization: Organization,
    user_api_key: Optional[str],
    config: Config,
) -> Dict[str, str]:
    headers: Dict[str, str] = {"Accept": "application/json"}
    headers.update(config.get_headers())

    if user_api_key:
        scheme = f"{action.auth_scheme} " if action.auth_scheme else ""
        headers[action.auth_header] = f"{scheme}{user_api_key}"
        logger.debug(
            "using user api key in header %s: %s",
            action.auth_header,
            mask_password(user_api_key),
        )

    if config.get_mock_api_marker() in (action.api_host or ""):
        headers["org_id"] = str(organization.id)

    # 只有带请求体的请求才需要该请求头
    if action.request_body_contents:
        headers["Content-Type"] = "application/json"

    return headers


def _cookie_header(
    param: ActionParameter,
    value: Any,
    previous: Optional[str],
    config: Config,
) -> str:
    if config.get_legacy_cookie_header():
        # 旧格式: 把整个参数描述转成字符串, 并覆盖之前的 Cookie
        return f"{param}={stringify(value)}"

    pair = f"{param.name}={stringify(value)}"
    return f"{previous}; {pair}" if previous else pair


def _apply_parameters(
    url: str,
    headers: Dict[str, str],
    action_parameters: List[ActionParameter],
    parameters: Dict[str, Any],
    config: Config,
) -> str:
    query_params: Dict[str, str] = {}

    for param in action_parameters:
        logger.debug("processing param: %s", param.name)

        forced = param.single_enum_value()
        if forced is not None:
            parameters[param.name] = forced

        value = parameters.get(param.name)
        if not is_truthy(value):
            logger.debug("Parameter not provided: %s", param.name)
            continue

        if param.in_ == ParameterLocation.PATH.value:
            url = url.replace(
                f"{{{param.name}}}",
                quote(stringify(value), safe=_URI_COMPONENT_SAFE),
            )
        elif param.in_ == ParameterLocation.QUERY.value:
            query_params[param.name] = stringify(value)
        elif param.in_ == ParameterLocation.HEADER.value:
            headers[param.name] = stringify(value)
        elif param.in_ == ParameterLocation.COOKIE.value:
            headers["Cookie"] = _cookie_header(
                param, value, headers.get("Cookie"), config
            )
        else:
            raise ActionConfigError(
                f'Parameter "{param.name}" has invalid location: {param.in_}',
                field="parameters",
            )

    if query_params:
        url += f"?{urlencode(query_params)}"
    return url


def construct_http_request(
    action: Action,
    parameters: Mapping[str, Any],
    organization: Organization,
    user_api_key: Optional[str] = None,
    stream: Optional[StreamCallback] = None,
    config: Optional[Config] = None,
) -> Tuple[str, RequestOptions]:
    """构建 HTTP 请求 / Build the HTTP request for an action

    Args:
        action: action 描述 / Action descriptor
        parameters: 运行时参数 / Runtime parameter values
        organization: 组织上下文 / Organization context
        user_api_key: 用户 API Key,可选 / Optional user API key
        stream: 调试事件回调,可选 / Optional debug event sink
        config: 配置对象 / Configuration

    Returns:
        (url, 请求选项) / (url, request options)

    Raises:
        ActionConfigError: action 缺少 path/method/host,或参数位置非法等
    """
    cfg = Config.with_configs(config)
    method = _check_action(action)

    logger.debug(
        "Constructing http request for action %s (%s %s)",
        action.name,
        method,
        action.path,
    )

    params: Dict[str, Any] = dict(parameters or {})
    headers = _build_headers(action, organization, user_api_key, cfg)

    body: Optional[str] = None
    if method != "GET" and action.request_body_contents:
        schema = body_properties_from_request_body_contents(
            action.request_body_contents
        )
        all_params = fill_no_choice_required_params(params, schema)
        body = json.dumps(
            build_body(schema, all_params, cfg.get_keep_falsy_values())
        )

    # host 与 path 直接拼接, 不做 URL join
    url = f"{action.api_host}{action.path}"
    url = _apply_parameters(
        url, headers, list(action.parameters or []), params, cfg
    )

    request_options = RequestOptions(method=method, headers=headers, body=body)

    log_message = (
        f"Attempting fetch with url: {url}\n\nWith options:"
        f"{json.dumps(request_options.to_dict(), indent=2)}"
    )
    if stream is not None:
        stream({"role": "debug", "content": log_message})

    return url, request_options
