"""Results page model for cursor pagination."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import Field

from .model import ParcelModel

T = TypeVar("T")


class Page(ParcelModel, Generic[T]):
    """One batch of results plus the cursor for the next batch.

    An absent or empty ``next_page_token`` is the only end-of-results signal;
    an empty ``results`` list with a token is a valid intermediate page.
    """

    results: list[T] = Field(default_factory=list)
    next_page_token: str | None = None

    @property
    def has_next(self) -> bool:
        return bool(self.next_page_token)

    def __len__(self) -> int:
        return len(self.results)


class PageParams(ParcelModel):
    """Paging controls accepted by every list/search endpoint.

    Endpoint filters subclass this; unknown keys are passed through to the
    server unchanged so newer filter fields work without a client release.
    """

    page_size: int | None = Field(None, gt=0)
    page_token: str | None = None
