"""配置管理模块 / Configuration Management Module

此模块提供 actionflow 的全局配置管理功能。
This module provides global configuration management for actionflow.
"""

import os
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()


def get_env_with_default(default: str, *key: str) -> str:
    """从环境变量获取值,支持多个候选键 / Get value from environment variables with multiple fallback keys

    Args:
        default: 默认值 / Default value
        *key: 候选环境变量名 / Candidate environment variable names

    Returns:
        str: 环境变量值或默认值 / Environment variable value or default value
    """
    for k in key:
        v = os.getenv(k)
        if v is not None:
            return v
    return default


class Config:
    """actionflow 全局配置类 / actionflow Global Configuration Class

    用于管理请求执行相关的配置。
    Used for managing request execution settings.

    支持从参数或环境变量读取配置。
    Supports reading configuration from parameters or environment variables.

    Examples:
        >>> # 从参数创建配置 / Create config from parameters
        >>> config = Config(
        ...     local_hostname="https://app.example.com",
        ...     timeout=30,
        ... )
        >>> # 或从环境变量读取 / Or read from environment variables
        >>> config = Config()
    """

    __slots__ = (
        "_local_hostname",
        "_timeout",
        "_mock_api_marker",
        "_legacy_cookie_header",
        "_keep_falsy_values",
        "_headers",
        "__weakref__",
    )

    def __init__(
        self,
        local_hostname: Optional[str] = None,
        timeout: Optional[float] = None,
        mock_api_marker: Optional[str] = None,
        legacy_cookie_header: Optional[bool] = None,
        keep_falsy_values: Optional[bool] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        """初始化配置 / Initialize configuration

        Args:
            local_hostname: 本服务地址,用于 HTML 转换和 mock 接口 / Base URL of this service,
                used for HTML conversion and the mock API
                未提供时从环境变量读取: ACTIONFLOW_LOCAL_HOSTNAME
                Read from env var if not provided: ACTIONFLOW_LOCAL_HOSTNAME
            timeout: 请求超时时间(秒),默认 60 / Request timeout in seconds, defaults to 60
                未提供时从环境变量读取: ACTIONFLOW_TIMEOUT
            mock_api_marker: 识别 mock 主机的子串,默认 "api/mock" / Substring identifying a mock host
            legacy_cookie_header: 是否保留旧的 Cookie 头格式 / Reproduce the legacy Cookie header format
            keep_falsy_values: 请求体是否保留 0/False/"" 等值 / Keep 0, False and "" in request bodies
            headers: 自定义请求头,可选 / Custom request headers, optional
        """

        if local_hostname is None:
            local_hostname = get_env_with_default(
                "", "ACTIONFLOW_LOCAL_HOSTNAME"
            )
        if timeout is None:
            raw_timeout = get_env_with_default("", "ACTIONFLOW_TIMEOUT")
            timeout = float(raw_timeout) if raw_timeout else None
        if mock_api_marker is None:
            mock_api_marker = get_env_with_default(
                "", "ACTIONFLOW_MOCK_API_MARKER"
            )

        self._local_hostname = local_hostname or None
        self._timeout = timeout
        self._mock_api_marker = mock_api_marker or None
        self._legacy_cookie_header = legacy_cookie_header
        self._keep_falsy_values = keep_falsy_values
        self._headers = headers or {}

    @classmethod
    def with_configs(cls, *configs: Optional["Config"]) -> "Config":
        return cls().update(*configs)

    def update(self, *configs: Optional["Config"]) -> "Config":
        """
        使用给定的配置对象更新当前实例,优先使用靠后的值

        Args:
            configs: 要合并的配置对象

        Returns:
            合并后的配置对象
        """

        for config in configs:
            if config is None:
                continue

            for attr in filter(
                lambda x: x != "__weakref__",
                self.__slots__,
            ):
                value = getattr(config, attr)
                if value is not None:
                    if type(value) is dict:
                        getattr(self, attr).update(getattr(config, attr) or {})
                    else:
                        setattr(self, attr, value)

        return self

    def __repr__(self) -> str:

        return "Config{%s}" % (
            ", ".join([
                f'"{key}": "{getattr(self, key)}"'
                for key in self.__slots__
                if key != "__weakref__"
            ])
        )

    def get_local_hostname(self) -> str:
        """获取本服务地址"""
        if self._local_hostname:
            return self._local_hostname.rstrip("/")

        return "http://localhost:3000"

    def get_timeout(self) -> float:
        """获取请求超时时间"""
        return self._timeout or 60

    def get_mock_api_marker(self) -> str:
        """获取 mock 主机标记"""
        return self._mock_api_marker or "api/mock"

    def get_mock_api_host(self) -> str:
        """获取 mock 接口地址 / Get the stub backend base URL"""
        return f"{self.get_local_hostname()}/{self.get_mock_api_marker()}"

    def get_legacy_cookie_header(self) -> bool:
        return bool(self._legacy_cookie_header)

    def get_keep_falsy_values(self) -> bool:
        return bool(self._keep_falsy_values)

    def get_headers(self) -> Dict[str, str]:
        """获取自定义请求头"""
        return self._headers or {}
