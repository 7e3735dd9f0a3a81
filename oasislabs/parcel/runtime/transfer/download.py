"""Streaming, abortable document downloads.

Architecture:
    A ``DownloadSession`` wraps one internal ``_DownloadStream`` state machine
    (idle -> active -> done | aborted | failed) and exposes two thin
    consumption adapters on top of it:
    - pull iteration (``async for chunk in session``)
    - push to sink (``await session.pipe_to(sink)``)

    Both adapters drive the same ``pull()`` loop, so redirect handling, status
    checks and abort semantics are implemented once.

Design Decisions:
    - Lazy: constructing a session performs no I/O, so the caller can keep a
      handle to ``abort()`` before any byte moves
    - Every suspension point (request, body read, sink write) is raced
      against the session's ``CancellationToken``; closing the response is
      registered as a token callback
    - Backpressure: the next chunk is read only after the sink accepted the
      previous one, bounding memory to one chunk in flight
    - Single use: a second consumption raises ``SessionConsumedError`` instead
      of silently re-sending the request
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator
from time import perf_counter
from typing import Any, Protocol

import aiohttp

from ...core.cancellation import CancellationToken
from ...core.config import DEFAULT_CHUNK_SIZE
from ...core.enums import SessionState
from ...core.exceptions import (
    AbortError,
    NetworkError,
    ParcelError,
    SessionConsumedError,
    SinkError,
)
from ..rest.http_client import raise_for_status
from ..rest.redirect import RedirectResolver
from ..telemetry import (
    log_download_aborted,
    log_download_completed,
    log_download_failed,
    log_download_started,
)

logger = logging.getLogger(__name__)


class ChunkSink(Protocol):
    """Destination for downloaded chunks.

    ``write`` may be a plain method (binary file objects) or return an
    awaitable (async writers). Raising signals a write failure.
    """

    def write(self, chunk: bytes) -> Any: ...


class _DownloadStream:
    """Single cancellable byte stream shared by both consumption modes."""

    def __init__(self, resolver: RedirectResolver, url: str, chunk_size: int) -> None:
        self.url = url
        self.state = SessionState.IDLE
        self.token = CancellationToken()
        self.bytes_transferred = 0
        self._resolver = resolver
        self._chunk_size = chunk_size
        self._response: aiohttp.ClientResponse | None = None
        self._error: ParcelError | None = None
        self._started_at: float | None = None

    async def pull(self) -> bytes | None:
        """Return the next chunk, or None at end of stream.

        Raises:
            AbortError: Session aborted before or during the read
            HttpStatusError: Server refused the download (first pull only)
            NetworkError: Connection failed or the body was truncated
        """
        if self.state is SessionState.ABORTED:
            raise AbortError()
        if self.state is SessionState.DONE:
            return None
        if self.state is SessionState.FAILED:
            raise self._error or ParcelError(f"Download of {self.url} failed")
        if self.state is SessionState.IDLE:
            await self._start()

        if self._response is None:
            raise ParcelError(f"Download of {self.url} has no open response")
        try:
            chunk = await self.token.guard(self._response.content.read(self._chunk_size))
        except (aiohttp.ClientError, OSError) as e:
            reason = str(e) or type(e).__name__
            error = NetworkError(f"Download of {self.url} interrupted: {reason}")
            self.fail(error)
            raise error from e

        if not chunk:
            self._complete()
            return None
        return chunk

    def record(self, size: int) -> None:
        """Count bytes handed to the consumer."""
        self.bytes_transferred += size

    async def _start(self) -> None:
        self.state = SessionState.ACTIVE
        self._started_at = perf_counter()
        log_download_started(url=self.url)
        try:
            response = await self.token.guard(
                self._resolver.open("GET", self.url, stream=True),
                discard=lambda r: r.close(),
            )
        except AbortError:
            raise
        except ParcelError as e:
            self.fail(e)
            raise

        self._response = response
        self.token.add_callback(response.close)
        try:
            await self.token.guard(
                raise_for_status(response, operation="document download", expected=(200,))
            )
        except AbortError:
            raise
        except ParcelError as e:
            self.fail(e)
            raise

    def abort(self) -> bool:
        """Flip to ABORTED and cancel in-flight I/O. No-op once terminal."""
        if self.state.is_terminal:
            return False
        self.state = SessionState.ABORTED
        self.token.cancel()
        log_download_aborted(url=self.url, bytes_transferred=self.bytes_transferred)
        return True

    def fail(self, error: ParcelError) -> None:
        if self.state.is_terminal:
            return
        self.state = SessionState.FAILED
        self._error = error
        self._close_response()
        log_download_failed(
            url=self.url,
            bytes_transferred=self.bytes_transferred,
            error_type=type(error).__name__,
            error_message=str(error),
        )

    def abandon(self) -> None:
        """Release the transport when the consumer stops early."""
        if not self.state.is_terminal:
            if self.state is SessionState.ACTIVE:
                logger.debug("Download abandoned by consumer", extra={"url": self.url})
            self.state = SessionState.ABORTED
            self.token.cancel()
        self._close_response()

    def _complete(self) -> None:
        self.state = SessionState.DONE
        if self._response is not None:
            self._response.release()
            self.token.remove_callback(self._response.close)
        latency_ms = (perf_counter() - (self._started_at or perf_counter())) * 1000.0
        log_download_completed(
            url=self.url, bytes_transferred=self.bytes_transferred, latency_ms=latency_ms
        )

    def _close_response(self) -> None:
        if self._response is not None:
            self.token.remove_callback(self._response.close)
            self._response.close()


class DownloadSession:
    """One lazy, abortable download of a document's bytes.

    Example:
        >>> session = parcel.download_document(document_id)
        >>> with open("out.bin", "wb") as f:
        ...     await session.pipe_to(f)

        >>> async for chunk in parcel.download_document(document_id):
        ...     process(chunk)
    """

    def __init__(
        self,
        resolver: RedirectResolver,
        url: str,
        *,
        document_id: str | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.document_id = document_id
        self._stream = _DownloadStream(resolver, url, chunk_size)
        self._consumed = False

    @property
    def url(self) -> str:
        return self._stream.url

    @property
    def state(self) -> SessionState:
        return self._stream.state

    @property
    def aborted(self) -> bool:
        return self._stream.state is SessionState.ABORTED

    @property
    def bytes_transferred(self) -> int:
        return self._stream.bytes_transferred

    def abort(self) -> None:
        """Abort the download.

        Idempotent and safe to call from another task while a pull or pipe is
        pending; the pending operation raises ``AbortError``. Chunks read from
        the network but not yet handed over are discarded.
        """
        self._stream.abort()

    def __aiter__(self) -> AsyncIterator[bytes]:
        self._claim()
        return self._iterate()

    async def pipe_to(self, sink: ChunkSink) -> int:
        """Write every chunk to ``sink`` in order.

        Returns:
            Number of bytes written

        Raises:
            SinkError: ``sink.write`` failed (original exception chained)
            AbortError: ``abort()`` was called
            HttpStatusError | NetworkError: Download failed
        """
        self._claim()
        stream = self._stream
        try:
            while True:
                chunk = await stream.pull()
                if chunk is None:
                    return stream.bytes_transferred
                try:
                    result = sink.write(chunk)
                    if inspect.isawaitable(result):
                        await stream.token.guard(result)
                except AbortError:
                    raise
                except Exception as e:
                    error = SinkError(str(e) or type(e).__name__, original=e)
                    stream.fail(error)
                    raise error from e
                stream.record(len(chunk))
        finally:
            stream.abandon()

    async def _iterate(self) -> AsyncIterator[bytes]:
        stream = self._stream
        try:
            while True:
                chunk = await stream.pull()
                if chunk is None:
                    return
                stream.record(len(chunk))
                yield chunk
        finally:
            stream.abandon()

    def _claim(self) -> None:
        if self._consumed:
            raise SessionConsumedError(
                f"Download of {self.url} has already been consumed; start a new download"
            )
        self._consumed = True

    def __repr__(self) -> str:
        return (
            f"DownloadSession(url={self.url!r}, state={self.state.value}, "
            f"bytes_transferred={self.bytes_transferred})"
        )
