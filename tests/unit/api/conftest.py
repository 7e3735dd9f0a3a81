"""In-process stand-in for the Parcel API and storage services."""

from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime

import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from oasislabs.parcel import Parcel, ParcelConfig

TOKEN = "test-token"
IDENTITY_ID = "IPoxXkdvFsrqzDdU7h3QqSs"


def pod_document(document_id: str, size: int = 0, details: dict | None = None) -> dict:
    return {
        "id": document_id,
        "createdAt": datetime(2021, 3, 4, tzinfo=UTC).isoformat(),
        "creator": IDENTITY_ID,
        "owner": IDENTITY_ID,
        "size": size,
        "details": details or {},
    }


class FakeParcelService:
    """Routes and state of the fake service.

    Every request is recorded as ``(method, path, query, body)`` so tests can
    assert exactly what went over the wire.
    """

    def __init__(self) -> None:
        self.documents: dict[str, bytes] = {}
        self.metadata: dict[str, dict] = {}
        self.requests: list[tuple[str, str, dict, object]] = []
        self.slow_started = asyncio.Event()
        self.release_slow = asyncio.Event()
        self.app = web.Application(
            client_max_size=8 * 1024 * 1024, middlewares=[self.authenticate]
        )
        self.app.router.add_get("/storage/{id}/download", self.download)
        self.app.router.add_get("/blobs/{id}", self.blob)
        self.app.router.add_post("/storage", self.upload)
        self.app.router.add_post("/api/documents/search", self.search)
        self.app.router.add_get("/api/documents/{id}/history", self.history)
        self.app.router.add_get("/api/documents/{id}", self.get_document)
        self.app.router.add_put("/api/documents/{id}", self.update_document)
        self.app.router.add_delete("/api/documents/{id}", self.delete_document)
        self.app.router.add_get("/api/identities/me", self.current_identity)
        self.app.router.add_get("/api/identities/{id}/permissions", self.permissions)
        self.app.router.add_get("/api/identities/{id}", self.identity)

    @web.middleware
    async def authenticate(self, request: web.Request, handler):
        if request.headers.get("Authorization") != f"Bearer {TOKEN}":
            return web.json_response({"error": "unauthorized"}, status=401)
        body = None
        if request.content_type == "application/json" and request.can_read_body:
            body = await request.json()
        self.requests.append((request.method, request.path, dict(request.query), body))
        return await handler(request)

    # --- storage -------------------------------------------------------------

    async def download(self, request: web.Request) -> web.StreamResponse:
        document_id = request.match_info["id"]
        if document_id == "redirected":
            raise web.HTTPTemporaryRedirect("/blobs/redirected")
        if document_id == "slow":
            response = web.StreamResponse()
            await response.prepare(request)
            self.slow_started.set()
            await asyncio.wait_for(self.release_slow.wait(), timeout=5)
            return response
        if document_id not in self.documents:
            return web.json_response({"error": "not found"}, status=404)
        return web.Response(body=self.documents[document_id])

    async def blob(self, request: web.Request) -> web.Response:
        return web.Response(body=b"redirected payload")

    async def upload(self, request: web.Request) -> web.Response:
        reader = await request.multipart()
        metadata_part = await reader.next()
        assert metadata_part.name == "metadata"
        raw_metadata = await metadata_part.read()
        data_part = await reader.next()
        assert data_part.name == "data"
        data = bytes(await data_part.read())

        metadata = json.loads(raw_metadata) if raw_metadata else {}
        document_id = f"D{len(self.documents) + 1}"
        self.documents[document_id] = data
        self.metadata[document_id] = {
            "content_type": metadata_part.headers.get("Content-Type"),
            "raw": bytes(raw_metadata),
        }
        document = pod_document(document_id, len(data), metadata.get("details"))
        if metadata.get("owner"):
            document["owner"] = metadata["owner"]
        return web.json_response(document, status=201)

    # --- documents -----------------------------------------------------------

    async def get_document(self, request: web.Request) -> web.Response:
        document_id = request.match_info["id"]
        if document_id not in self.documents:
            return web.json_response({"error": "not found"}, status=404)
        return web.json_response(pod_document(document_id, len(self.documents[document_id])))

    async def update_document(self, request: web.Request) -> web.Response:
        update = await request.json()
        return web.json_response(
            pod_document(request.match_info["id"], details=update.get("details"))
        )

    async def delete_document(self, request: web.Request) -> web.Response:
        self.documents.pop(request.match_info["id"], None)
        return web.Response(status=204)

    async def search(self, request: web.Request) -> web.Response:
        body = await request.json()
        ids = sorted(self.documents)
        start = int(body.get("pageToken") or 0)
        size = int(body.get("pageSize") or len(ids) or 1)
        end = start + size
        return web.json_response(
            {
                "results": [pod_document(i, len(self.documents[i])) for i in ids[start:end]],
                "nextPageToken": str(end) if end < len(ids) else None,
            }
        )

    async def history(self, request: web.Request) -> web.Response:
        events = [
            {"createdAt": "2021-03-0%dT00:00:00Z" % day, "document": "D1", "accessor": IDENTITY_ID}
            for day in range(1, 4)
        ]
        start = int(request.query.get("page-token", 0))
        size = int(request.query.get("page-size", len(events)))
        end = start + size
        return web.json_response(
            {
                "results": events[start:end],
                "nextPageToken": str(end) if end < len(events) else "",
            }
        )

    # --- identities ----------------------------------------------------------

    async def current_identity(self, request: web.Request) -> web.Response:
        raise web.HTTPTemporaryRedirect(f"/api/identities/{IDENTITY_ID}")

    async def identity(self, request: web.Request) -> web.Response:
        return web.json_response(
            {
                "id": request.match_info["id"],
                "createdAt": "2021-01-01T00:00:00Z",
                "tokenVerifiers": [{"sub": "acme", "iss": "auth.oasislabs.com"}],
            }
        )

    async def permissions(self, request: web.Request) -> web.Response:
        return web.json_response(
            {
                "results": [
                    {
                        "id": "PRM1",
                        "createdAt": "2021-01-01T00:00:00Z",
                        "appId": request.query.get("app", "A1"),
                        "name": "read",
                    }
                ],
                "nextPageToken": None,
            }
        )


@pytest_asyncio.fixture
async def service():
    fake = FakeParcelService()
    server = TestServer(fake.app)
    await server.start_server()
    fake.server = server
    yield fake
    fake.release_slow.set()
    await server.close()


@pytest_asyncio.fixture
async def parcel(service):
    config = ParcelConfig(
        api_url=str(service.server.make_url("/api")),
        storage_url=str(service.server.make_url("/storage")),
        timeout=5,
        chunk_size=16 * 1024,
    )
    async with Parcel(TOKEN, config=config) as client:
        yield client
