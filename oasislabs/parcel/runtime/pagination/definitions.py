"""Filter validation and fetch signatures for cursor pagination."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

import pydantic

from ...core.exceptions import ValidationError
from ...models.page import Page, PageParams

T = TypeVar("T")
F = TypeVar("F", bound=PageParams)

# Fetches one page for a snake_case filter dict (``page_token`` included when
# continuing a cursor).
FetchPage = Callable[[dict[str, Any]], Awaitable[Page[Any]]]


def validate_filter(
    filter: PageParams | Mapping[str, Any] | None,
    model: type[F],
) -> F:
    """Validate a caller-supplied filter against ``model``.

    Accepts ``None``, a mapping (snake_case or camelCase keys) or a model
    instance.

    Raises:
        ValidationError: Filter is malformed. Raised before any request.
    """
    if filter is None:
        return model()
    if isinstance(filter, model):
        return filter
    if isinstance(filter, PageParams):
        filter = filter.model_dump(exclude_none=True)
    if not isinstance(filter, Mapping):
        raise ValidationError(
            f"{model.__name__} must be a mapping or model, got {type(filter).__name__}"
        )
    try:
        return model.model_validate(dict(filter))
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid {model.__name__}: {e}") from e


def filter_values(params: PageParams) -> dict[str, Any]:
    """Snake_case dict of the set filter fields (extras keep their spelling)."""
    return params.model_dump(exclude_none=True)
