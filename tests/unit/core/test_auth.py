"""Unit tests for token providers."""

import pytest

from oasislabs.parcel.core import StaticTokenProvider, TokenProvider, as_token_provider


class _RotatingProvider:
    def __init__(self):
        self.calls = 0

    async def get_token(self) -> str:
        self.calls += 1
        return f"token-{self.calls}"


@pytest.mark.asyncio
async def test_static_provider_returns_token():
    """StaticTokenProvider always yields its token."""
    provider = StaticTokenProvider("secret")
    assert await provider.get_token() == "secret"
    assert "secret" not in repr(provider)


def test_static_provider_rejects_empty_token():
    with pytest.raises(ValueError):
        StaticTokenProvider("")


def test_as_token_provider():
    """Strings are wrapped, providers pass through, other types fail."""
    assert isinstance(as_token_provider("t"), StaticTokenProvider)

    custom = _RotatingProvider()
    assert isinstance(custom, TokenProvider)
    assert as_token_provider(custom) is custom

    with pytest.raises(TypeError):
        as_token_provider(42)  # type: ignore[arg-type]
