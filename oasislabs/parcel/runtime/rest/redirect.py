"""Single-hop redirect handling.

aiohttp's built-in redirect following drops the ``Authorization`` header on
cross-origin hops, but the API redirects authenticated requests to other
hosts (e.g. ``/identities/me`` or storage downloads served from a blob
host). The resolver follows at most one hop itself, re-sending the exact
headers of the first request.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urljoin

import aiohttp

from ...core.enums import REDIRECT_STATUSES
from ..telemetry import log_redirect_followed
from .http_client import HTTPClient


class RedirectResolver:
    """Open a request, following one redirect hop with the same auth."""

    def __init__(self, http: HTTPClient) -> None:
        self._http = http

    async def open(
        self,
        method: str,
        url: str,
        *,
        params: Any = None,
        json: Any = None,
        stream: bool = False,
    ) -> aiohttp.ClientResponse:
        """Return the authoritative response for ``method url``.

        A redirect response is released and never returned. A second
        redirect is returned as-is; callers treat it as an unexpected status.
        """
        target = self._http.resolve_url(url)
        request_headers = await self._http.authorize()
        response = await self._http.open(
            method,
            target,
            params=params,
            json=json,
            headers=request_headers,
            authorize=False,
            stream=stream,
        )
        location = None
        if response.status in REDIRECT_STATUSES:
            location = response.headers.get("Location")
        if not location:
            return response

        # The original query string is already part of the first URL; the
        # location is authoritative for the second hop.
        next_url = urljoin(str(response.url), location)
        status = response.status
        response.release()
        log_redirect_followed(method=method, url=target, location=next_url, status=status)
        return await self._http.open(
            method,
            next_url,
            json=json,
            headers=request_headers,
            authorize=False,
            stream=stream,
        )
