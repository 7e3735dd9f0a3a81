"""Cursor pagination runtime."""

from .definitions import FetchPage, filter_values, validate_filter
from .paginator import Paginator

__all__ = [
    "FetchPage",
    "Paginator",
    "filter_values",
    "validate_filter",
]
