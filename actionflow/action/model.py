"""Action 模型定义 / Action Model Definitions

定义 action、参数、组织以及请求选项相关的数据模型。
Defines data models for actions, their parameters, organizations and request options.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from typing_extensions import TypedDict

from actionflow.utils.model import BaseModel, Field


class ParameterLocation(str, Enum):
    """参数位置 / Parameter Location"""

    PATH = "path"
    """路径参数 / Path parameter"""
    QUERY = "query"
    """查询参数 / Query parameter"""
    HEADER = "header"
    """请求头参数 / Header parameter"""
    COOKIE = "cookie"
    """Cookie 参数 / Cookie parameter"""


class RequestMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


SUPPORTED_METHODS = {m.value for m in RequestMethod}


class ActionParameter(BaseModel):
    """OpenAPI 参数描述 / OpenAPI parameter object"""

    name: str
    in_: str = Field(alias="in")
    required: Optional[bool] = False
    description: Optional[str] = None
    param_schema: Optional[Dict[str, Any]] = Field(
        alias="schema", default=None
    )

    def single_enum_value(self) -> Optional[Any]:
        """必填且枚举只有一个值时返回该值 / The forced value of a required one-value enum"""
        enum = (self.param_schema or {}).get("enum")
        if self.required and isinstance(enum, list) and len(enum) == 1:
            return enum[0]
        return None


class Action(BaseModel):
    """可调用的 HTTP 操作 / A configured, schema-described HTTP operation"""

    name: Optional[str] = None
    description: Optional[str] = None
    path: Optional[str] = None
    request_method: Optional[str] = None
    api_host: Optional[str] = None
    parameters: Optional[List[ActionParameter]] = None
    request_body_contents: Optional[Dict[str, Any]] = None
    auth_header: str = "Authorization"
    auth_scheme: Optional[str] = None
    keys_to_keep: Optional[Any] = None
    active: Optional[bool] = True


class Organization(BaseModel):
    """组织上下文 / Organization context used to tag mock requests"""

    id: Union[int, str]
    name: Optional[str] = None


class RequestOptions(BaseModel):
    """构造好的请求选项 / Method, headers and optional JSON body of a request"""

    method: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None


class ActionResult(BaseModel):
    """一次 action 调用的结果 / Normalized output plus the identifier store"""

    output: Any = None
    id_store: Dict[str, str] = Field(default_factory=dict)


class DebugEvent(TypedDict):
    role: str
    content: str


StreamCallback = Callable[[DebugEvent], None]
