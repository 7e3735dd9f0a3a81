"""Base model for API resources."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ResourceId = str


class ParcelModel(BaseModel):
    """Immutable model with camelCase wire names.

    Fields are declared in snake_case and (de)serialized using their
    camelCase alias; unknown fields sent by newer servers are kept.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_pod(self) -> dict:
        """Plain JSON-compatible dict using wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Resource(ParcelModel):
    """Server-assigned identity shared by every stored resource."""

    id: ResourceId = Field(..., min_length=1)
    created_at: datetime
