"""Core components."""

from .auth import StaticTokenProvider, TokenProvider, as_token_provider
from .cancellation import CancellationToken
from .config import DEFAULT_API_URL, DEFAULT_CHUNK_SIZE, DEFAULT_STORAGE_URL, ParcelConfig
from .enums import REDIRECT_STATUSES, SessionState
from .exceptions import (
    AbortError,
    HttpStatusError,
    NetworkError,
    PaginationError,
    ParcelError,
    SessionConsumedError,
    SinkError,
    SourceError,
    TransferError,
    ValidationError,
)

__all__ = [
    "ParcelConfig",
    "DEFAULT_API_URL",
    "DEFAULT_STORAGE_URL",
    "DEFAULT_CHUNK_SIZE",
    "TokenProvider",
    "StaticTokenProvider",
    "as_token_provider",
    "CancellationToken",
    "SessionState",
    "REDIRECT_STATUSES",
    "ParcelError",
    "NetworkError",
    "HttpStatusError",
    "AbortError",
    "TransferError",
    "SinkError",
    "SourceError",
    "SessionConsumedError",
    "PaginationError",
    "ValidationError",
]
