"""Unit tests for MultipartUploadEncoder.

The encoded body is written into an in-memory collector and split back into
parts, so the tests check wire shape without depending on header order.
"""

from __future__ import annotations

import asyncio
import io
import json
import time

import aiohttp
import pytest

from oasislabs.parcel.runtime.transfer import MultipartUploadEncoder, choose_boundary
from oasislabs.parcel.runtime.transfer.multipart import LARGE_BUFFER_THRESHOLD, encode_metadata


class Collector:
    """Minimal stream writer that keeps everything written to it."""

    def __init__(self):
        self.buffer = bytearray()

    async def write(self, data):
        self.buffer.extend(data)


def parse_parts(body: bytes, boundary: str) -> list[tuple[dict[str, str], bytes]]:
    delimiter = b"--" + boundary.encode()
    assert body.endswith(delimiter + b"--\r\n")
    parts = []
    for raw in body.split(delimiter)[1:-1]:
        raw = raw[len(b"\r\n") : -len(b"\r\n")]
        head, _, content = raw.partition(b"\r\n\r\n")
        headers = {}
        for line in head.decode().split("\r\n"):
            name, _, value = line.partition(":")
            headers[name.strip().lower()] = value.strip()
        parts.append((headers, content))
    return parts


async def encode(encoder: MultipartUploadEncoder) -> list[tuple[dict[str, str], bytes]]:
    collector = Collector()
    await encoder.build().write(collector)
    return parse_parts(bytes(collector.buffer), encoder.boundary)


async def agen(chunks):
    for chunk in chunks:
        yield chunk


class TestMetadataEncoding:
    """Test metadata serialization and boundary choice."""

    def test_compact_json(self):
        metadata = {"details": {"title": "x", "tags": ["to-app-A1"]}}
        assert encode_metadata(metadata) == b'{"details":{"title":"x","tags":["to-app-A1"]}}'

    def test_empty_metadata(self):
        assert encode_metadata(None) == b""
        assert encode_metadata({}) == b""

    def test_boundary_is_128_bit_hex(self):
        boundary = choose_boundary()
        assert len(boundary) == 32
        int(boundary, 16)

    def test_boundary_not_in_metadata(self):
        boundaries = {choose_boundary() for _ in range(20)}
        for boundary in boundaries:
            assert choose_boundary(boundary.encode()) != boundary


class TestMultipartShape:
    """Test the two-part form-data body."""

    @pytest.mark.asyncio
    async def test_metadata_and_data_parts(self):
        """Test part order, names and content types."""
        encoder = MultipartUploadEncoder(b"fixture data", {"details": {"title": "x"}})

        (meta_headers, meta), (data_headers, data) = await encode(encoder)

        assert 'name="metadata"' in meta_headers["content-disposition"]
        assert meta_headers["content-type"] == "application/json"
        assert json.loads(meta) == {"details": {"title": "x"}}
        assert 'name="data"' in data_headers["content-disposition"]
        assert data_headers["content-type"] == "application/octet-stream"
        assert data == b"fixture data"
        assert encoder.content_type == f"multipart/form-data; boundary={encoder.boundary}"

    @pytest.mark.asyncio
    async def test_empty_metadata_is_text_plain(self):
        encoder = MultipartUploadEncoder(b"x")
        (meta_headers, meta), _ = await encode(encoder)
        assert meta_headers["content-type"] == "text/plain"
        assert meta == b""

    @pytest.mark.asyncio
    async def test_str_data_is_utf8(self):
        encoder = MultipartUploadEncoder("Eggs and Emmentaler")
        _, (_, data) = await encode(encoder)
        assert data == b"Eggs and Emmentaler"
        assert not encoder.streaming

    @pytest.mark.asyncio
    async def test_large_buffer_streamed_in_slices(self):
        """Test buffers above the threshold are written chunk by chunk."""
        payload = bytes(range(256)) * (2 * LARGE_BUFFER_THRESHOLD // 256)
        encoder = MultipartUploadEncoder(payload, chunk_size=64 * 1024)

        _, (_, data) = await encode(encoder)

        assert data == payload
        assert encoder.bytes_sent == len(payload)

    def test_build_once(self):
        encoder = MultipartUploadEncoder(b"x")
        encoder.build()
        with pytest.raises(RuntimeError):
            encoder.build()

    def test_rejects_unsupported_data(self):
        with pytest.raises(TypeError):
            MultipartUploadEncoder(42)  # type: ignore[arg-type]


class TestIncrementalSources:
    """Test streaming sources are forwarded in order without buffering."""

    @pytest.mark.asyncio
    async def test_async_iterable(self):
        encoder = MultipartUploadEncoder(agen([b"fixture ", b"", b"data"]))
        assert encoder.streaming

        _, (_, data) = await encode(encoder)

        assert data == b"fixture data"
        assert encoder.bytes_sent == 12

    @pytest.mark.asyncio
    async def test_sync_iterable(self):
        encoder = MultipartUploadEncoder(iter([b"a", b"b", b"c"]))
        _, (_, data) = await encode(encoder)
        assert data == b"abc"

    @pytest.mark.asyncio
    async def test_file_object(self):
        encoder = MultipartUploadEncoder(io.BytesIO(b"x" * 1000), chunk_size=64)
        _, (_, data) = await encode(encoder)
        assert data == b"x" * 1000

    @pytest.mark.asyncio
    async def test_source_error_recorded(self):
        """Test a failing source is remembered for the upload task."""

        async def failing():
            yield b"a"
            raise RuntimeError("whoops")

        encoder = MultipartUploadEncoder(failing())
        with pytest.raises(RuntimeError, match="whoops"):
            await encoder.build().write(Collector())

        assert isinstance(encoder.source_error, RuntimeError)
        assert encoder.bytes_sent == 1

    @pytest.mark.asyncio
    async def test_blocking_file_read_does_not_stall_loop(self):
        """Test a slow synchronous read leaves other tasks running."""

        class SlowFile:
            def __init__(self, chunks):
                self._chunks = list(chunks)

            def read(self, size):
                time.sleep(0.05)
                return self._chunks.pop(0) if self._chunks else b""

        ticks = 0

        async def ticker():
            nonlocal ticks
            while True:
                await asyncio.sleep(0.005)
                ticks += 1

        ticking = asyncio.create_task(ticker())
        try:
            _, (_, data) = await encode(MultipartUploadEncoder(SlowFile([b"ab", b"cd"])))
        finally:
            ticking.cancel()

        assert data == b"abcd"
        assert ticks >= 5

    @pytest.mark.asyncio
    async def test_blocking_file_error_recorded(self):
        class BrokenFile:
            def read(self, size):
                raise OSError("disk gone")

        encoder = MultipartUploadEncoder(BrokenFile())
        with pytest.raises(OSError, match="disk gone"):
            await encoder.build().write(Collector())

        assert isinstance(encoder.source_error, OSError)

    def test_writer_is_aiohttp_multipart(self):
        assert isinstance(MultipartUploadEncoder(b"x").build(), aiohttp.MultipartWriter)
