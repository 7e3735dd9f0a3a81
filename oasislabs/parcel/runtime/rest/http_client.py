"""Async HTTP client wrapper (the transport boundary).

Every request made by the library goes through ``HTTPClient.open``: one
request, no automatic redirects, bearer authorization added from the
configured token provider, and aiohttp failures mapped onto ``NetworkError``.
The returned response is owned by the caller, who must release it.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from ...core.auth import TokenProvider
from ...core.exceptions import HttpStatusError, NetworkError

logger = logging.getLogger(__name__)


class HTTPClient:
    """Async HTTP client wrapper."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        *,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        # Streaming bodies may legitimately take longer than ``timeout`` in
        # total, so only individual socket reads are bounded.
        self.stream_timeout = aiohttp.ClientTimeout(total=None, sock_read=timeout)
        self._token_provider = token_provider
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def resolve_url(self, url: str) -> str:
        """Combine ``base_url`` with a relative path; absolute URLs pass through."""
        if self.base_url and not url.startswith(("http://", "https://")):
            return f"{self.base_url}/{url.lstrip('/')}" if url else self.base_url
        return url

    async def authorize(self, headers: Mapping[str, str] | None = None) -> dict[str, str]:
        """Return a copy of ``headers`` with bearer authorization added.

        An explicit ``Authorization`` header supplied by the caller wins.
        """
        authorized = dict(headers or {})
        if self._token_provider is not None and not any(
            k.lower() == "authorization" for k in authorized
        ):
            token = await self._token_provider.get_token()
            authorized["Authorization"] = f"Bearer {token}"
        return authorized

    async def open(
        self,
        method: str,
        url: str,
        *,
        params: Any = None,
        json: Any = None,
        data: Any = None,
        headers: Mapping[str, str] | None = None,
        authorize: bool = True,
        stream: bool = False,
    ) -> aiohttp.ClientResponse:
        """Issue a single request and return the unread response.

        Args:
            method: HTTP method
            url: Absolute URL or path relative to ``base_url``
            params: Query parameters
            json: JSON body
            data: Raw body or aiohttp payload (e.g. a multipart writer)
            headers: Extra headers
            authorize: Add bearer authorization (False when already present)
            stream: Use the streaming timeout instead of the total timeout

        Raises:
            NetworkError: Connection failure or timeout before headers arrive
        """
        target = self.resolve_url(url)
        request_headers = await self.authorize(headers) if authorize else dict(headers or {})
        try:
            return await self.session.request(
                method,
                target,
                params=params,
                json=json,
                data=data,
                headers=request_headers,
                allow_redirects=False,
                timeout=self.stream_timeout if stream else self.timeout,
            )
        except (aiohttp.ClientError, TimeoutError) as e:
            raise NetworkError(f"{method} {target} failed: {str(e) or type(e).__name__}") from e

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()


def extract_error_detail(body: bytes) -> str | None:
    """Pull the human-readable error out of a response body.

    The API answers failures with ``{"error": "..."}``; anything else is
    returned as text.
    """
    if not body:
        return None
    text = body.decode("utf-8", errors="replace").strip()
    try:
        payload = json.loads(text)
    except ValueError:
        return text or None
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return text or None


async def raise_for_status(
    response: aiohttp.ClientResponse,
    *,
    operation: str,
    expected: tuple[int, ...] = (200,),
) -> None:
    """Raise ``HttpStatusError`` unless ``response.status`` is expected.

    The error body is read (and the response released) before raising.
    """
    if response.status in expected:
        return
    try:
        body = await response.read()
    except aiohttp.ClientError:
        body = b""
    finally:
        response.release()
    detail = extract_error_detail(body)
    message = f"error in {operation} (status {response.status})"
    if detail:
        message = f"{message}: {detail}"
    raise HttpStatusError(message, status_code=response.status, detail=detail)
