"""异常定义"""

from typing import Optional


class ActionFlowError(Exception):
    """actionflow 基础异常类"""

    def __init__(
        self,
        message: str,
        **kwargs,
    ):
        """初始化异常

        Args:
            message: 错误消息
            details: 详细信息
        """
        msg = message or ""
        if kwargs is not None:
            msg += self.kwargs_str(**kwargs)

        super().__init__(msg)
        self.message = message
        self.details = kwargs

    @classmethod
    def kwargs_str(cls, **kwargs) -> str:
        """获取详细信息字符串

        Returns:
            str: 详细信息字符串
        """
        if not kwargs:
            return ""
        import json

        return json.dumps(
            kwargs,
            ensure_ascii=False,
            default=lambda x: x.__dict__,
        )

    def details_str(self) -> str:
        return self.kwargs_str(**self.details)

    def __str__(self) -> str:
        return self.message


class ActionConfigError(ActionFlowError):
    """Action 配置异常 / Raised before any I/O when an action cannot be turned into a request"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **kwargs,
    ):
        self.field = field
        super().__init__(message, **kwargs)


class HTTPError(ActionFlowError):
    """HTTP 异常类"""

    def __init__(
        self,
        status_code: int,
        message: str,
        **kwargs,
    ):
        self.status_code = status_code
        super().__init__(message, **kwargs)

    def __str__(self) -> str:
        return f"HTTP {self.status_code}: {self.message}"


class ClientError(HTTPError):
    """客户端异常类"""


class ResponseParseError(ClientError):
    """响应解析异常 / The upstream body could not be parsed as the accepted type"""

    def __init__(
        self,
        status_code: int,
        message: str,
        body: Optional[str] = None,
    ):
        self.body = body
        super().__init__(status_code, message)
