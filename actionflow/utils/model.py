"""模型基类 / Base Model

所有数据模型共享的 pydantic 基类。
The pydantic base class shared by every data model.
"""

from typing import Any, Dict, List, Union

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict, Field

JSONValue = Union[
    None, bool, int, float, str, List["JSONValue"], Dict[str, "JSONValue"]
]
"""JSON 值类型 / Any value that survives a JSON round trip"""


class BaseModel(PydanticBaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        arbitrary_types_allowed=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """按别名导出,跳过 None / Dump by alias, skipping unset None values"""
        return self.model_dump(by_alias=True, exclude_none=True)


__all__ = ["BaseModel", "Field", "JSONValue"]
