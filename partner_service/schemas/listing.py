from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ListParams(BaseModel):
    """Partner listing query. ``keys`` holds the raw query-string keys as received."""

    name: str = ""
    country: str = ""
    sort: str = ""
    order: str = ""
    status: str = ""
    page: int = 0
    limit: int = 0
    keys: list[str] = Field(default_factory=list)

    @property
    def offset(self) -> int:
        return max(self.page - 1, 0) * self.limit


class QueryParams(BaseModel):
    """Sub-resource query used with ``fields=`` on a single partner."""

    fields: str = ""
    sort: str = ""
    order: str = ""
    page: int = 0
    limit: int = 0
    keys: list[str] = Field(default_factory=list)

    @property
    def offset(self) -> int:
        return max(self.page - 1, 0) * self.limit


class MetaData(BaseModel):
    current_page: int
    per_page: int
    total: int
    next: int = 0
    prev: int = 0


class PageResult(BaseModel, Generic[T]):
    records: list[T] = Field(default_factory=list)
    metadata: MetaData | None = None


class PartnerSubResource(BaseModel):
    id: int
    name: str
    extra: dict[str, Any] = Field(default_factory=dict)
