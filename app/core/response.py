"""Standardized JSON response envelope helpers.

Every endpoint answers with ``{success, message?, data?, errors?}``.
"""


from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope shared by success and error bodies."""

    success: bool = True
    message: str | None = None
    data: T | None = None
    errors: list[dict[str, Any]] | None = None

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
    }


def ok(data: Any = None, message: str | None = None) -> dict:
    """Build a success envelope dict for use with ApiResponse."""
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body
