"""Identity and permission models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .model import Resource, ResourceId
from .page import PageParams

IdentityId = ResourceId
PermissionId = ResourceId


class Identity(Resource):
    """A principal that can own documents and be granted permissions."""

    token_verifiers: list[dict[str, Any]] = Field(default_factory=list)


class Permission(Resource):
    """A permission an identity has agreed to."""

    app_id: ResourceId
    name: str = ""
    description: str = ""
    grants: list[dict[str, Any]] = Field(default_factory=list)
    allow_text: str = ""
    deny_text: str = ""


class GrantedPermissionsFilter(PageParams):
    """Filter for the permissions an identity has granted."""

    app: ResourceId | None = None
