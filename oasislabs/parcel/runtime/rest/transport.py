"""JSON request/response transport for simple resource calls."""

from __future__ import annotations

import json
from typing import Any

import aiohttp

from ...core.exceptions import NetworkError, ParcelError
from .http_client import HTTPClient, raise_for_status
from .redirect import RedirectResolver


class RESTTransport:
    """Send one JSON request and return the parsed body.

    Redirects are followed once (``RedirectResolver``); any status outside
    ``expected_status`` raises ``HttpStatusError``. The HTTP client is
    borrowed from the caller, which also closes it.
    """

    def __init__(self, base_url: str, *, http: HTTPClient) -> None:
        self.base_url = base_url.rstrip("/")
        self._resolver = RedirectResolver(http)

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}" if path else self.base_url

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json_body: Any = None,
        expected_status: tuple[int, ...] = (200,),
    ) -> Any:
        """Send a request and decode the JSON response.

        Returns:
            Parsed JSON, or None for empty bodies (e.g. 204 No Content)

        Raises:
            HttpStatusError: Status not in ``expected_status``
            NetworkError: Transport failure
        """
        url = self.url_for(path)
        response = await self._resolver.open(method, url, params=params, json=json_body)
        await raise_for_status(
            response, operation=f"{method} {path}", expected=expected_status
        )
        try:
            body = await response.read()
        except aiohttp.ClientError as e:
            raise NetworkError(f"{method} {url} failed while reading body: {e}") from e
        finally:
            response.release()

        if not body:
            return None
        try:
            return json.loads(body)
        except ValueError as e:
            raise ParcelError(f"{method} {path} returned invalid JSON: {e}") from e
