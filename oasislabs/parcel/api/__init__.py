"""High-level client API."""

from .parcel import Parcel

__all__ = ["Parcel"]
