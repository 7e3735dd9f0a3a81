"""Client configuration.

Endpoint URLs and transfer tuning live in a single frozen model so one
configuration object can be shared by every facade and runtime component.
Environment overrides follow the names used by the Parcel deployment
tooling (``PARCEL_API_URL``, ``PARCEL_STORAGE_URL``).
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_API_URL = "https://api.oasislabs.com/parcel/v1"
DEFAULT_STORAGE_URL = "https://storage.oasislabs.com/v1/parcel"
DEFAULT_TIMEOUT = 30.0
DEFAULT_CHUNK_SIZE = 64 * 1024


class ParcelConfig(BaseModel):
    """Connection settings for a Parcel client.

    Attributes:
        api_url: Base URL of the resource API (identities, documents, ...)
        storage_url: Base URL of the document storage service
        timeout: Total timeout in seconds for a single non-streaming request
        chunk_size: Maximum size of a chunk yielded by downloads
    """

    api_url: str = DEFAULT_API_URL
    storage_url: str = DEFAULT_STORAGE_URL
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    chunk_size: int = Field(DEFAULT_CHUNK_SIZE, gt=0)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("api_url", "storage_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ParcelConfig:
        """Build a config from ``PARCEL_*`` environment variables.

        Unset variables fall back to the defaults.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if env.get("PARCEL_API_URL"):
            values["api_url"] = env["PARCEL_API_URL"]
        if env.get("PARCEL_STORAGE_URL"):
            values["storage_url"] = env["PARCEL_STORAGE_URL"]
        if env.get("PARCEL_TIMEOUT"):
            values["timeout"] = env["PARCEL_TIMEOUT"]
        return cls(**values)
