from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(CamelModel, Generic[DataT]):
    status_code: int
    data: DataT
    message: str
    success: bool = True


class ApiErrorResponse(CamelModel):
    status_code: int
    message: str
    success: bool = False
    errors: list[Any] = Field(default_factory=list)


def ok(data: Any, message: str, status_code: int = 200) -> dict[str, Any]:
    return {"status_code": status_code, "data": data, "message": message, "success": True}
