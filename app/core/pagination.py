"""Pagination helpers for list endpoints."""


import math

from fastapi import Query
from pydantic import BaseModel


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class PaginationParams:
    """FastAPI dependency for `?page=1&limit=20&sort=createdAt&order=desc`."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-based)"),
        limit: int = Query(default=20, ge=1, le=100, description="Items per page"),
        sort: str = Query(
            default="created_at",
            pattern="^[A-Za-z_]+$",
            description="Sort field (snake_case or camelCase)",
        ),
        order: str = Query(default="desc", pattern="^(asc|desc)$", description="Sort order"),
    ):
        self.page = page
        self.limit = limit
        # accept the camelCase names the API returns
        self.sort = "".join(f"_{c.lower()}" if c.isupper() else c for c in sort)
        self.order = order

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> PageMeta:
        return PageMeta(
            total=total,
            page=self.page,
            limit=self.limit,
            pages=math.ceil(total / self.limit) if total else 0,
        )
