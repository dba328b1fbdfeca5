"""通用工具模块 / Common Utilities Module

配置、异常、日志与辅助函数。
Configuration, exceptions, logging and helper functions.
"""

from .config import Config
from .exception import (
    ActionConfigError,
    ActionFlowError,
    ClientError,
    HTTPError,
    ResponseParseError,
)

__all__ = [
    "Config",
    "ActionFlowError",
    "ActionConfigError",
    "HTTPError",
    "ClientError",
    "ResponseParseError",
]
