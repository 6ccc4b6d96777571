"""Pagination helpers for list endpoints."""


import math
from typing import Optional

from fastapi import Query, Request

from app.core.exceptions import validation_error
from app.schemas.common import CamelModel


class PaginationParams:
    """FastAPI dependency for `?page=1&limit=20`.

    Default and maximum page size come from the settings the app was built with.
    """

    def __init__(
        self,
        request: Request,
        page: int = Query(default=1, ge=1, description="Page number (1-based)"),
        limit: Optional[int] = Query(default=None, ge=1, description="Items per page"),
    ):
        settings = request.app.state.settings
        if limit is None:
            limit = settings.default_page_size
        elif limit > settings.max_page_size:
            raise validation_error(
                "Validation failed",
                [{"field": "limit", "message": f"Must be at most {settings.max_page_size}"}],
            )
        self.page = page
        self.limit = limit

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PageMeta(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "PageMeta":
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit else 1,
        )
