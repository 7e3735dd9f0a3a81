"""Document upload task.

``UploadTask`` sends one multipart body built by ``MultipartUploadEncoder``
and resolves to the created ``Document`` once the server answers 201.
The request starts as soon as the task is created; the caller awaits
``task.finished`` (or the task itself) for the result.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Generator
from time import perf_counter
from typing import Any

import aiohttp

from ...core.exceptions import NetworkError, ParcelError, SourceError
from ...models.document import Document
from ..rest.http_client import HTTPClient, raise_for_status
from ..telemetry import log_upload_completed, log_upload_failed
from .multipart import MultipartUploadEncoder

logger = logging.getLogger(__name__)


class UploadTask:
    """In-flight upload of one document.

    Attributes:
        url: Storage endpoint the body is posted to
        document: Created document, set once the upload completed
        encoder: Body encoder (exposes ``bytes_sent`` and ``boundary``)
    """

    def __init__(self, http: HTTPClient, url: str, encoder: MultipartUploadEncoder) -> None:
        self.url = url
        self.encoder = encoder
        self.document: Document | None = None
        self._http = http
        self._finished: asyncio.Task[Document] = asyncio.get_running_loop().create_task(
            self._run()
        )

    @property
    def finished(self) -> asyncio.Task[Document]:
        """Resolves to the created document; fails with the upload's error."""
        return self._finished

    def done(self) -> bool:
        return self._finished.done()

    def __await__(self) -> Generator[Any, None, Document]:
        return self._finished.__await__()

    async def _run(self) -> Document:
        started_at = perf_counter()
        logger.debug(
            "Upload started", extra={"url": self.url, "streaming": self.encoder.streaming}
        )
        try:
            document = await self._send()
        except ParcelError as e:
            log_upload_failed(
                bytes_sent=self.encoder.bytes_sent,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise

        self.document = document
        log_upload_completed(
            document_id=document.id,
            bytes_sent=self.encoder.bytes_sent,
            latency_ms=(perf_counter() - started_at) * 1000.0,
        )
        return document

    async def _send(self) -> Document:
        try:
            response = await self._http.open("POST", self.url, data=self.encoder.build())
        except Exception:
            # aiohttp reports a failing body iterator as a connection error
            self._raise_source_error()
            raise
        if self.encoder.source_error is not None:
            response.release()
            self._raise_source_error()

        try:
            await raise_for_status(response, operation="document upload", expected=(201,))
            try:
                body = await response.read()
            except aiohttp.ClientError as e:
                raise NetworkError(f"POST {self.url} failed while reading body: {e}") from e
        finally:
            response.release()

        try:
            return Document.model_validate(json.loads(body))
        except ValueError as e:
            raise ParcelError(f"document upload returned an invalid document: {e}") from e

    def _raise_source_error(self) -> None:
        source_error = self.encoder.source_error
        if source_error is None:
            return
        reason = str(source_error) or type(source_error).__name__
        raise SourceError(
            f"Upload source failed: {reason}", original=source_error
        ) from source_error

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"UploadTask(url={self.url!r}, {state}, bytes_sent={self.encoder.bytes_sent})"
