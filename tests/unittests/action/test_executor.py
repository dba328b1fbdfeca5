"""请求执行单元测试

使用 respx mock 服务端, 验证重定向处理与响应规范化。
"""

import json

import httpx
import pytest
import respx

from actionflow.action.executor import (
    make_http_request,
    make_http_request_async,
)
from actionflow.action.model import RequestOptions
from actionflow.utils.exception import ClientError, ResponseParseError

LOCAL = "http://localhost:3000"


def get_options(**headers) -> RequestOptions:
    return RequestOptions(
        method="GET", headers={"Accept": "application/json", **headers}
    )


class TestEmptyAndErrorResponses:
    """测试空响应与失败状态码"""

    @respx.mock
    def test_empty_2xx_is_success(self):
        respx.delete("https://api.example.com/users/1").mock(
            return_value=httpx.Response(204)
        )

        result = make_http_request(
            "https://api.example.com/users/1",
            RequestOptions(method="DELETE", headers={}),
            LOCAL,
        )

        assert result == {"status": "Action completed successfully"}

    @respx.mock
    def test_empty_5xx_is_failure(self):
        respx.get("https://api.example.com/users").mock(
            return_value=httpx.Response(500)
        )

        result = make_http_request(
            "https://api.example.com/users", get_options(), LOCAL
        )

        assert result == {"status": "Action failed"}

    @respx.mock
    def test_error_status_with_body_is_described(self):
        respx.get("https://api.example.com/users").mock(
            return_value=httpx.Response(404, text='{"error": "not found"}')
        )

        result = make_http_request(
            "https://api.example.com/users", get_options(), LOCAL
        )

        assert result == (
            'The function returned a 404, the response was: {"error": "not'
            ' found"}'
        )

    @respx.mock
    def test_transport_error_raises_client_error(self):
        respx.get("https://api.example.com/users").mock(
            side_effect=httpx.ConnectError("boom")
        )

        with pytest.raises(ClientError) as exc_info:
            make_http_request(
                "https://api.example.com/users", get_options(), LOCAL
            )

        assert exc_info.value.status_code == 0


class TestRedirects:
    """测试手动重定向"""

    @respx.mock
    def test_relative_location_uses_original_origin(self):
        first = respx.get("https://api.example.com/old").mock(
            return_value=httpx.Response(302, headers={"location": "/new"})
        )
        second = respx.get("https://api.example.com/new").mock(
            return_value=httpx.Response(200, json={"ok": True})
        )

        result = make_http_request(
            "https://api.example.com/old",
            get_options(Authorization="Bearer secret", **{"X-Trace": "t"}),
            LOCAL,
        )

        assert result == {"ok": True}
        assert first.calls.last.request.headers["Authorization"] == (
            "Bearer secret"
        )
        redirected = second.calls.last.request
        assert "Authorization" not in redirected.headers
        assert redirected.headers["X-Trace"] == "t"

    @respx.mock
    def test_absolute_location_is_used_as_is(self):
        respx.get("https://api.example.com/old").mock(
            return_value=httpx.Response(
                301, headers={"location": "https://files.example.org/doc"}
            )
        )
        route = respx.get("https://files.example.org/doc").mock(
            return_value=httpx.Response(200, json=[1, 2])
        )

        result = make_http_request(
            "https://api.example.com/old", get_options(), LOCAL
        )

        assert route.called
        assert result == [1, 2]

    @respx.mock(assert_all_called=False)
    def test_only_one_redirect_is_followed(self, respx_mock):
        respx_mock.get("https://api.example.com/a").mock(
            return_value=httpx.Response(302, headers={"location": "/b"})
        )
        respx_mock.get("https://api.example.com/b").mock(
            return_value=httpx.Response(302, headers={"location": "/c"})
        )
        third = respx_mock.get("https://api.example.com/c").mock(
            return_value=httpx.Response(200, json={})
        )

        result = make_http_request(
            "https://api.example.com/a", get_options(), LOCAL
        )

        assert not third.called
        assert result == {"status": "Action failed"}

    @respx.mock
    def test_missing_location_is_soft_failure(self):
        respx.get("https://api.example.com/a").mock(
            return_value=httpx.Response(302)
        )

        result = make_http_request(
            "https://api.example.com/a", get_options(), LOCAL
        )

        assert result == {
            "status": (
                "Redirect failed as original request did not return location"
            )
        }

    @respx.mock
    def test_lowercase_authorization_is_stripped(self):
        respx.get("https://api.example.com/a").mock(
            return_value=httpx.Response(307, headers={"location": "/b"})
        )
        second = respx.get("https://api.example.com/b").mock(
            return_value=httpx.Response(200, json={})
        )
        options = get_options(authorization="token")

        make_http_request("https://api.example.com/a", options, LOCAL)

        assert "authorization" not in second.calls.last.request.headers
        assert options.headers["authorization"] == "token"


class TestResponseTypes:
    """测试按 Accept 类型规范化响应"""

    @respx.mock
    def test_json_is_parsed(self):
        respx.get("https://api.example.com/users").mock(
            return_value=httpx.Response(200, json=[{"id": 1}])
        )

        result = make_http_request(
            "https://api.example.com/users", get_options(), LOCAL
        )

        assert result == [{"id": 1}]

    @respx.mock
    def test_malformed_json_raises(self):
        respx.get("https://api.example.com/users").mock(
            return_value=httpx.Response(200, text="<html>oops</html>")
        )

        with pytest.raises(ResponseParseError) as exc_info:
            make_http_request(
                "https://api.example.com/users", get_options(), LOCAL
            )

        assert exc_info.value.body == "<html>oops</html>"

    @respx.mock
    def test_missing_accept_defaults_to_json(self):
        respx.get("https://api.example.com/users").mock(
            return_value=httpx.Response(200, json={"a": 1})
        )

        result = make_http_request(
            "https://api.example.com/users",
            RequestOptions(method="GET", headers={}),
            LOCAL,
        )

        assert result == {"a": 1}

    @respx.mock
    def test_markup_is_converted_by_local_service(self):
        respx.get("https://api.example.com/page").mock(
            return_value=httpx.Response(200, text="<p>Hello</p>")
        )
        parse_route = respx.post(f"{LOCAL}/api/parse-html").mock(
            return_value=httpx.Response(200, text="Hello")
        )

        result = make_http_request(
            "https://api.example.com/page",
            RequestOptions(
                method="GET", headers={"Accept": "application/xhtml+xml"}
            ),
            LOCAL,
        )

        assert result == "Hello"
        sent = parse_route.calls.last.request
        assert json.loads(sent.content) == {"html": "<p>Hello</p>"}
        assert sent.headers["Content-Type"] == "application/json"

    @respx.mock
    def test_other_types_return_raw_text(self):
        respx.get("https://api.example.com/report").mock(
            return_value=httpx.Response(200, text="a,b\n1,2")
        )

        result = make_http_request(
            "https://api.example.com/report",
            RequestOptions(method="GET", headers={"Accept": "text/csv"}),
            LOCAL,
        )

        assert result == "a,b\n1,2"

    @respx.mock
    def test_body_is_sent(self):
        route = respx.post("https://api.example.com/users").mock(
            return_value=httpx.Response(201, json={"id": 9})
        )

        result = make_http_request(
            "https://api.example.com/users",
            RequestOptions(
                method="POST",
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
                body='{"name": "Ann"}',
            ),
            LOCAL,
        )

        assert result == {"id": 9}
        assert json.loads(route.calls.last.request.content) == {"name": "Ann"}


class TestAsync:
    """测试异步版本"""

    @respx.mock
    @pytest.mark.asyncio
    async def test_redirect_and_json(self):
        respx.get("https://api.example.com/old").mock(
            return_value=httpx.Response(302, headers={"location": "/new"})
        )
        second = respx.get("https://api.example.com/new").mock(
            return_value=httpx.Response(200, json={"ok": True})
        )

        result = await make_http_request_async(
            "https://api.example.com/old",
            get_options(Authorization="Bearer secret"),
            LOCAL,
        )

        assert result == {"ok": True}
        assert "Authorization" not in second.calls.last.request.headers

    @respx.mock
    @pytest.mark.asyncio
    async def test_empty_body(self):
        respx.get("https://api.example.com/x").mock(
            return_value=httpx.Response(204)
        )

        result = await make_http_request_async(
            "https://api.example.com/x", get_options(), LOCAL
        )

        assert result == {"status": "Action completed successfully"}

    @respx.mock
    @pytest.mark.asyncio
    async def test_markup_conversion(self):
        respx.get("https://api.example.com/page").mock(
            return_value=httpx.Response(200, text="<b>hi</b>")
        )
        respx.post(f"{LOCAL}/api/parse-html").mock(
            return_value=httpx.Response(200, text="hi")
        )

        result = await make_http_request_async(
            "https://api.example.com/page",
            RequestOptions(method="GET", headers={"Accept": "application/xml"}),
            LOCAL,
        )

        assert result == "hi"
