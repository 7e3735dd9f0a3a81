"""Bearer token providers.

Token acquisition (client credentials, JWT signing) is handled outside this
library; the HTTP client only needs something that yields a bearer token.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenProvider(Protocol):
    """Source of bearer tokens for the ``Authorization`` header."""

    async def get_token(self) -> str:
        """Return a currently valid access token."""
        ...


class StaticTokenProvider:
    """Token provider that always returns the same token."""

    def __init__(self, token: str) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        self._token = token

    async def get_token(self) -> str:
        return self._token

    def __repr__(self) -> str:
        return "StaticTokenProvider(token=***)"


def as_token_provider(token: str | TokenProvider) -> TokenProvider:
    """Wrap a raw token string; pass providers through unchanged."""
    if isinstance(token, str):
        return StaticTokenProvider(token)
    if isinstance(token, TokenProvider):
        return token
    raise TypeError(f"Expected str or TokenProvider, got {type(token).__name__}")
