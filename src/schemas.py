"""
Dofus Retro Tracker - Transfer Objects

Pydantic shapes shared by the REST API (responses) and the API client
(parsing). Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class _CamelModel(BaseModel):
    """Base for wire models: camelCase aliases, populate by either name."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------------------
# Entity DTOs
# ---------------------------------------------------------------------------


class CategoryDTO(_CamelModel):
    """An auction house sub-category."""

    id: int
    dofus_id: int = Field(..., description="Game category identifier")
    name: str


class ItemDTO(_CamelModel):
    """
    An auction house item.

    ``category`` is always serialized; an item without a category carries an
    explicit null, never an empty object.
    """

    id: int
    item_gid: int = Field(..., description="Game item identifier (GID)")
    item_name: str | None = None
    category: CategoryDTO | None = None
    created_at: datetime
    updated_at: datetime | None = None


class PriceEntryDTO(_CamelModel):
    """One price observation for one lot size."""

    id: int
    item_id: int | None = None
    item_name: str | None = None
    price: int = Field(..., description="Observed price in kamas")
    quantity: int = Field(..., description="Lot size: 1, 10 or 100")
    created_at: datetime
    server_timestamp: int | None = Field(
        default=None, description="Game server timestamp (ms since epoch)"
    )
    formatted_price: str | None = Field(default=None, examples=["15 K"])


class LatestPriceDTO(_CamelModel):
    """Most recent observed price for one lot size."""

    price: int
    quantity: int
    timestamp: datetime


# ---------------------------------------------------------------------------
# Page envelope
# ---------------------------------------------------------------------------


class PagedResponse(_CamelModel, Generic[T]):
    """
    A content slice plus pagination metadata.

    Build with ``PagedResponse.of`` so the boundary flags are derived from
    page, size and total_elements. Parsed envelopes are checked for the same
    consistency rules.
    """

    content: list[T] = Field(default_factory=list)
    page_number: int = Field(..., ge=0)
    page_size: int = Field(..., ge=1)
    total_elements: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    first: bool
    last: bool
    has_next: bool
    has_previous: bool

    @classmethod
    def of(
        cls,
        content: list[T],
        page: int,
        size: int,
        total_elements: int,
    ) -> PagedResponse[T]:
        """
        Construct an envelope whose flags agree with page/size/total.

        An empty result has zero pages and is both first and last.
        """
        total_pages = math.ceil(total_elements / size) if size > 0 else 0
        first = page == 0
        last = page >= total_pages - 1
        return cls(
            content=content,
            page_number=page,
            page_size=size,
            total_elements=total_elements,
            total_pages=total_pages,
            first=first,
            last=last,
            has_next=not last,
            has_previous=not first,
        )

    @model_validator(mode="after")
    def _check_flags(self) -> PagedResponse[T]:
        if self.first != (self.page_number == 0):
            raise ValueError("first must be true exactly on page 0")
        if self.last != (self.page_number >= self.total_pages - 1):
            raise ValueError("last must be true exactly on the final page")
        if self.has_next == self.last:
            raise ValueError("hasNext must be the negation of last")
        if self.has_previous == self.first:
            raise ValueError("hasPrevious must be the negation of first")
        return self


# ---------------------------------------------------------------------------
# Service responses
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Uniform error body returned by every failing endpoint."""

    timestamp: datetime
    status: int = Field(..., examples=[404])
    error: str = Field(..., examples=["Not Found"])
    message: str = Field(..., examples=["Item with ID 999 not found"])
    path: str = Field(..., examples=["/api/v1/items/999"])


class HealthResponse(BaseModel):
    """Result of GET /health."""

    status: str = Field(..., examples=["UP"])
    database: str = Field(default="unknown", examples=["connected"])
