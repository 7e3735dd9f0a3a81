"""Multipart body encoding for document uploads.

The upload body always has two ``form-data`` parts, in order:

* ``metadata`` - compact JSON (``application/json``) when there is
  metadata to send, otherwise an empty ``text/plain`` part
* ``data`` - the raw document bytes (``application/octet-stream``)

Materialized buffers are handed to aiohttp without copying; incremental
sources (async iterables, iterables of bytes, file-like objects) are streamed
through an ``AsyncIterablePayload`` so the total length never has to be known
and memory stays bounded to one chunk.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import secrets
from collections.abc import AsyncIterable, AsyncIterator, Iterable
from typing import Any, Union

from aiohttp import AsyncIterablePayload, BytesPayload, MultipartWriter, Payload

from ...core.config import DEFAULT_CHUNK_SIZE

Buffer = Union[bytes, bytearray, memoryview, str]
DataSource = Union[Buffer, AsyncIterable[bytes], Iterable[bytes], Any]

# Above this size a materialized buffer is written as memoryview slices so
# the event loop is never blocked on one huge write.
LARGE_BUFFER_THRESHOLD = 1024 * 1024

_EXHAUSTED = object()


def encode_metadata(metadata: dict[str, Any] | None) -> bytes:
    """Compact JSON encoding of upload metadata (empty for no metadata)."""
    if not metadata:
        return b""
    return json.dumps(metadata, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def choose_boundary(reserved: bytes = b"") -> str:
    """Draw a 128-bit random boundary that does not occur in ``reserved``."""
    while True:
        boundary = secrets.token_hex(16)
        if boundary.encode("ascii") not in reserved:
            return boundary


def _as_bytes(chunk: Any) -> Any:
    return chunk.encode("utf-8") if isinstance(chunk, str) else chunk


def is_materialized(data: Any) -> bool:
    return isinstance(data, (bytes, bytearray, memoryview, str))


def is_incremental(data: Any) -> bool:
    return (
        isinstance(data, (AsyncIterable, Iterable)) and not is_materialized(data)
    ) or callable(getattr(data, "read", None))


class MultipartUploadEncoder:
    """Build the multipart body for one upload.

    The encoder records how many payload bytes were produced and, for
    incremental sources, the exception that interrupted reading so the
    caller can report it as a source failure rather than a network one.
    """

    def __init__(
        self,
        data: DataSource,
        metadata: dict[str, Any] | None = None,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if not (is_materialized(data) or is_incremental(data)):
            raise TypeError(
                "data must be bytes-like, str, an (async) iterable of bytes, "
                f"or a readable file object, got {type(data).__name__}"
            )
        if isinstance(data, str):
            data = data.encode("utf-8")
        elif isinstance(data, memoryview):
            data = data.cast("B")
        self._data = data
        self._metadata = encode_metadata(metadata)
        self._chunk_size = chunk_size
        self.boundary = choose_boundary(self._metadata)
        self.bytes_sent = 0
        self.source_error: BaseException | None = None
        self._built = False

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    @property
    def streaming(self) -> bool:
        return not is_materialized(self._data)

    def build(self) -> MultipartWriter:
        """Return the multipart writer to pass as the request body.

        May be called once; an incremental source cannot be replayed.
        """
        if self._built:
            raise RuntimeError("multipart body has already been built")
        self._built = True

        writer = MultipartWriter("form-data", boundary=self.boundary)
        writer.append_payload(self._metadata_part())
        writer.append_payload(self._data_part())
        return writer

    def _metadata_part(self) -> Payload:
        if self._metadata:
            part = BytesPayload(self._metadata, content_type="application/json")
        else:
            part = BytesPayload(b"", content_type="text/plain")
        part.set_content_disposition("form-data", name="metadata")
        return part

    def _data_part(self) -> Payload:
        data = self._data
        if is_materialized(data) and len(data) <= LARGE_BUFFER_THRESHOLD:
            self.bytes_sent = len(data)
            part: Payload = BytesPayload(data, content_type="application/octet-stream")
        else:
            part = AsyncIterablePayload(
                self._iter_source(), content_type="application/octet-stream"
            )
        part.set_content_disposition("form-data", name="data")
        return part

    async def _iter_source(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._read_source():
                if not chunk:
                    continue
                self.bytes_sent += len(chunk)
                yield chunk
        except Exception as e:
            self.source_error = e
            raise

    async def _read_source(self) -> AsyncIterator[Any]:
        data = self._data
        loop = asyncio.get_running_loop()
        if is_materialized(data):
            view = memoryview(data)
            for offset in range(0, len(view), self._chunk_size):
                yield view[offset : offset + self._chunk_size]
        elif callable(getattr(data, "read", None)):
            # Blocking reads go through the default executor.
            blocking = not inspect.iscoroutinefunction(data.read)
            while True:
                if blocking:
                    chunk = await loop.run_in_executor(None, data.read, self._chunk_size)
                else:
                    chunk = await data.read(self._chunk_size)
                if not chunk:
                    return
                yield _as_bytes(chunk)
        elif isinstance(data, AsyncIterable):
            async for chunk in data:
                yield _as_bytes(chunk)
        else:
            iterator = iter(data)
            while True:
                chunk = await loop.run_in_executor(None, next, iterator, _EXHAUSTED)
                if chunk is _EXHAUSTED:
                    return
                yield _as_bytes(chunk)
