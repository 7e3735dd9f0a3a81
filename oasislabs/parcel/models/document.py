"""Document and access-event models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from .model import ParcelModel, Resource, ResourceId
from .page import PageParams

DocumentId = ResourceId


class Document(Resource):
    """Metadata of a stored binary object."""

    creator: ResourceId
    owner: ResourceId
    size: int = Field(0, ge=0)
    details: dict[str, Any] = Field(default_factory=dict)
    originating_job: ResourceId | None = None

    @property
    def tags(self) -> list[str]:
        return list(self.details.get("tags", []))


class AccessEvent(ParcelModel):
    """One recorded access of a document."""

    created_at: datetime
    document: DocumentId
    accessor: ResourceId


class UploadParams(ParcelModel):
    """Optional parameters of a document upload.

    Attributes:
        details: Free-form document details (title, tags, ...)
        owner: Identity that will own the document (defaults to the uploader)
        to_app: App the document is uploaded for; sent as a ``to-app-<id>`` tag
    """

    details: dict[str, Any] | None = None
    owner: ResourceId | None = Field(None, min_length=1)
    to_app: ResourceId | None = Field(None, min_length=1)

    model_config = ConfigDict(extra="forbid")

    @field_validator("details")
    @classmethod
    def validate_tags(cls, v: dict[str, Any] | None) -> dict[str, Any] | None:
        if v is not None and "tags" in v:
            tags = v["tags"]
            if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
                raise ValueError("details.tags must be a list of strings")
        return v

    def to_metadata(self) -> dict[str, Any]:
        """Metadata object for the multipart ``metadata`` part."""
        details = dict(self.details or {})
        if self.to_app:
            details["tags"] = [*details.get("tags", []), f"to-app-{self.to_app}"]
        metadata: dict[str, Any] = {}
        if details:
            metadata["details"] = details
        if self.owner:
            metadata["owner"] = self.owner
        return metadata


class DocumentSearchParams(PageParams):
    """Filter for ``POST /documents/search``.

    Conditions are server-side expressions over resource fields, e.g.
    ``{"document.tags": {"$intersects": ["lang:en"]}}``, and are sent as-is.
    """

    accessible_in_context: dict[str, Any] | None = None
    selected_by_condition: dict[str, Any] | None = None


class AccessLogFilter(PageParams):
    """Filter for a document's access history."""

    accessor: ResourceId | None = None
    document: DocumentId | None = None


class DocumentUpdateParams(ParcelModel):
    """Writable fields of a document."""

    details: dict[str, Any] | None = None
    owner: ResourceId | None = Field(None, min_length=1)

    model_config = ConfigDict(extra="forbid")
