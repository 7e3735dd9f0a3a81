"""Oasis Parcel - async client for the Parcel document storage API."""

from .api import Parcel
from .core import (
    AbortError,
    HttpStatusError,
    NetworkError,
    PaginationError,
    ParcelConfig,
    ParcelError,
    SessionConsumedError,
    SessionState,
    SinkError,
    SourceError,
    StaticTokenProvider,
    TokenProvider,
    TransferError,
    ValidationError,
)
from .models import (
    AccessEvent,
    AccessLogFilter,
    Document,
    DocumentId,
    DocumentSearchParams,
    DocumentUpdateParams,
    GrantedPermissionsFilter,
    Identity,
    IdentityId,
    Page,
    PageParams,
    Permission,
    UploadParams,
)
from .runtime import DownloadSession, Paginator, UploadTask

__version__ = "0.1.0"

__all__ = [
    # Client
    "Parcel",
    "ParcelConfig",
    "TokenProvider",
    "StaticTokenProvider",
    # Transfers
    "DownloadSession",
    "UploadTask",
    "SessionState",
    "Paginator",
    # Models
    "AccessEvent",
    "AccessLogFilter",
    "Document",
    "DocumentId",
    "DocumentSearchParams",
    "DocumentUpdateParams",
    "GrantedPermissionsFilter",
    "Identity",
    "IdentityId",
    "Page",
    "PageParams",
    "Permission",
    "UploadParams",
    # Exceptions
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
