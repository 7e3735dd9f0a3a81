"""Response adapters turning JSON bodies into models."""

from __future__ import annotations

from typing import Any

import pydantic

from ..core.exceptions import ParcelError
from ..models.page import Page
from ..runtime.rest import ResponseAdapter


class ModelAdapter(ResponseAdapter):
    """Parse a single resource."""

    def __init__(self, model: type[pydantic.BaseModel]) -> None:
        self._model = model

    def parse(self, response: Any, params: dict[str, Any]) -> Any:
        try:
            return self._model.model_validate(response)
        except pydantic.ValidationError as e:
            raise ParcelError(f"Unexpected {self._model.__name__} response: {e}") from e


class PageAdapter(ModelAdapter):
    """Parse one results page of ``item_model`` records."""

    def __init__(self, item_model: type[pydantic.BaseModel]) -> None:
        super().__init__(Page[item_model])  # type: ignore[valid-type]


class EmptyAdapter(ResponseAdapter):
    """For endpoints answering 204 No Content."""

    def parse(self, response: Any, params: dict[str, Any]) -> None:
        return None
