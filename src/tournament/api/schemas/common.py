from __future__ import annotations

from typing import Generic, Iterable, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict
from pydantic_core import PydanticCustomError


DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base for API payloads: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ApiResponse(BaseModel, Generic[DataT]):
    success: bool
    message: str
    data: DataT | None = None


def one_of(value: str | None, allowed: Iterable[str], message: str) -> str | None:
    if value is not None and value not in allowed:
        raise PydanticCustomError("choice", message)
    return value
