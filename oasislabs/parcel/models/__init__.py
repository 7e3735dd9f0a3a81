"""Data models for Parcel resources.

Architecture:
    All models are Pydantic v2 models, immutable (frozen=True), declared in
    snake_case and exchanged with the server under camelCase aliases.

Model Categories:
    - Base: ParcelModel, Resource
    - Documents: Document, AccessEvent, UploadParams
    - Identities: Identity, Permission
    - Pagination: Page, PageParams and the endpoint filters built on it
"""

from .document import (
    AccessEvent,
    AccessLogFilter,
    Document,
    DocumentId,
    DocumentSearchParams,
    DocumentUpdateParams,
    UploadParams,
)
from .identity import GrantedPermissionsFilter, Identity, IdentityId, Permission, PermissionId
from .model import ParcelModel, Resource, ResourceId
from .page import Page, PageParams

__all__ = [
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
    "ParcelModel",
    "Permission",
    "PermissionId",
    "Resource",
    "ResourceId",
    "UploadParams",
]
