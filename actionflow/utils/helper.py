"""辅助工具模块 / Helper Utilities Module

此模块提供一些通用的辅助函数。
This module provides general utility functions.
"""

import json
import math
from typing import Any, Dict, Mapping, Optional, TypeVar

K = TypeVar("K")
V = TypeVar("V")


def mask_password(password: Optional[str]) -> str:
    """遮蔽密码用于日志记录 / Mask password for logging purposes

    将密码部分字符替换为星号,用于安全地记录日志。
    Replaces part of the password characters with asterisks for safe logging.

    Args:
        password: 原始密码,可选 / Original password, optional

    Returns:
        str: 遮蔽后的密码 / Masked password

    Examples:
        >>> mask_password("password123")
        'pa*******23'
        >>> mask_password("abc")
        'a*c'
    """
    if not password:
        return ""
    if len(password) <= 2:
        return "*" * len(password)
    if len(password) <= 4:
        return password[0] + "*" * (len(password) - 2) + password[-1]
    return password[0:2] + "*" * (len(password) - 4) + password[-2:]


def swap_keys_values(mapping: Mapping[K, V]) -> Dict[V, K]:
    """交换字典的键和值 / Invert a mapping

    Examples:
        >>> swap_keys_values({"a": "ID1"})
        {'ID1': 'a'}
    """
    return {value: key for key, value in mapping.items()}


def get_header(
    headers: Optional[Mapping[str, Any]], name: str
) -> Optional[Any]:
    """大小写不敏感地读取请求头 / Case-insensitive header lookup"""
    if not headers:
        return None
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def is_truthy(value: Any) -> bool:
    """判断参数值是否视为"已提供" / Whether a parameter value counts as supplied

    None、空字符串、0、False 和 NaN 视为未提供; 空列表和空字典视为已提供。
    None, "", 0, False and NaN are not supplied; empty lists and dicts are.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return value != 0 and not (
            isinstance(value, float) and math.isnan(value)
        )
    return True


def stringify(value: Any) -> str:
    """将参数值转换为 URL/请求头中使用的字符串"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)
