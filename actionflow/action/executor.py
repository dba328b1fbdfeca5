"""请求执行 / Request Executor

发起 HTTP 请求,手动处理一次重定向,并把响应统一为 JSON 兼容的值。
Issues the HTTP call, follows at most one redirect by hand and normalizes the
response into a single JSON-compatible value.
"""

import json
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urljoin, urlparse

import httpx

from actionflow.utils.config import Config
from actionflow.utils.exception import ClientError, ResponseParseError
from actionflow.utils.helper import get_header
from actionflow.utils.log import logger
from actionflow.utils.model import JSONValue

from .model import RequestOptions

REDIRECT_FAILED = {
    "status": "Redirect failed as original request did not return location"
}
ACTION_SUCCEEDED = {"status": "Action completed successfully"}
ACTION_FAILED = {"status": "Action failed"}

MARKUP_TYPES = {
    "application/html",
    "application/html+xml",
    "application/xml",
    "application/xhtml",
    "application/xhtml+xml",
}


def _strip_authorization(headers: Dict[str, str]) -> Dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() != "authorization"}


def _redirect_url(url: str, location: str) -> str:
    """相对地址基于原始 URL 的 origin 解析 / Resolve a relative location against the origin"""
    parsed = urlparse(url)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    return urljoin(f"{origin}/", location)


def _request_kwargs(url: str, options: RequestOptions) -> Dict[str, Any]:
    return {
        "method": options.method,
        "url": url,
        "headers": options.headers,
        "content": options.body,
    }


def _prepare_redirect(
    url: str, options: RequestOptions, response: httpx.Response
) -> Optional[Tuple[str, RequestOptions]]:
    location = response.headers.get("location")
    if not location:
        return None
    redirect_options = options.model_copy(
        update={"headers": _strip_authorization(options.headers)}
    )
    redirect_url = _redirect_url(url, location)
    logger.debug("Attempting fetch with redirected url: %s", redirect_url)
    return redirect_url, redirect_options


def _accept_type(options: RequestOptions) -> str:
    accept = get_header(options.headers, "Accept") or "application/json"
    return str(accept).strip().lower()


def _normalize(
    status: int, text: str, options: RequestOptions
) -> Tuple[JSONValue, bool]:
    """把响应转换为返回值; 第二个元素表示是否需要 HTML 转文本

    Returns the normalized value, and whether the text still needs the HTML
    conversion service.
    """
    if not text:
        succeeded = 200 <= status < 300
        return dict(ACTION_SUCCEEDED if succeeded else ACTION_FAILED), False

    if status >= 300:
        return (
            f"The function returned a {status}, the response was: {text}",
            False,
        )

    accept = _accept_type(options)
    if accept == "application/json":
        try:
            return json.loads(text), False
        except ValueError as e:
            raise ResponseParseError(
                status_code=status,
                message=f"Failed to parse JSON response: {e}",
                body=text,
            ) from e
    if accept in MARKUP_TYPES:
        return text, True
    return text, False


def _parse_html_request(local_hostname: str, text: str) -> Dict[str, Any]:
    return {
        "method": "POST",
        "url": f"{local_hostname.rstrip('/')}/api/parse-html",
        "headers": {"Content-Type": "application/json"},
        "content": json.dumps({"html": text}),
    }


def make_http_request(
    url: str,
    request_options: RequestOptions,
    local_hostname: Optional[str] = None,
    config: Optional[Config] = None,
) -> JSONValue:
    """执行请求并规范化响应 / Execute the request and normalize the response

    Args:
        url: 完整 URL / Full URL
        request_options: 请求选项 / Request options
        local_hostname: HTML 转换服务所在地址 / Host of the HTML conversion endpoint
        config: 配置对象 / Configuration

    Returns:
        解析后的 JSON、状态对象或文本 / Parsed JSON, a status object or text

    Raises:
        ResponseParseError: 接受 JSON 但响应不是合法 JSON
        ClientError: 网络层错误
    """
    cfg = Config.with_configs(config)
    host = local_hostname or cfg.get_local_hostname()

    try:
        with httpx.Client(
            timeout=cfg.get_timeout(), follow_redirects=False
        ) as client:
            response = client.request(**_request_kwargs(url, request_options))

            if 300 <= response.status_code < 400:
                logger.debug("Attempting manual redirect")
                redirect = _prepare_redirect(url, request_options, response)
                if redirect is None:
                    return dict(REDIRECT_FAILED)
                url, request_options = redirect
                response = client.request(
                    **_request_kwargs(url, request_options)
                )

            result, needs_conversion = _normalize(
                response.status_code, response.text, request_options
            )
            if not needs_conversion:
                return result

            converted = client.request(**_parse_html_request(host, result))
            return converted.text

    except httpx.RequestError as e:
        raise ClientError(
            status_code=0, message=f"Request error: {e!s}", url=url
        ) from e


async def make_http_request_async(
    url: str,
    request_options: RequestOptions,
    local_hostname: Optional[str] = None,
    config: Optional[Config] = None,
) -> JSONValue:
    """异步执行请求并规范化响应 / Async twin of make_http_request"""
    cfg = Config.with_configs(config)
    host = local_hostname or cfg.get_local_hostname()

    try:
        async with httpx.AsyncClient(
            timeout=cfg.get_timeout(), follow_redirects=False
        ) as client:
            response = await client.request(
                **_request_kwargs(url, request_options)
            )

            if 300 <= response.status_code < 400:
                logger.debug("Attempting manual redirect")
                redirect = _prepare_redirect(url, request_options, response)
                if redirect is None:
                    return dict(REDIRECT_FAILED)
                url, request_options = redirect
                response = await client.request(
                    **_request_kwargs(url, request_options)
                )

            result, needs_conversion = _normalize(
                response.status_code, response.text, request_options
            )
            if not needs_conversion:
                return result

            converted = await client.request(
                **_parse_html_request(host, result)
            )
            return converted.text

    except httpx.RequestError as e:
        raise ClientError(
            status_code=0, message=f"Request error: {e!s}", url=url
        ) from e
