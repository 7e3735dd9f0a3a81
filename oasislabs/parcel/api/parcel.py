"""Parcel client facade.

Architecture:
    ``Parcel`` is the single entry point of the library. It owns one
    ``HTTPClient`` (and with it the aiohttp connection pool) and hands it to:
    - ``RestRunner`` for plain JSON resource calls (endpoint specs)
    - ``DownloadSession`` for streaming document downloads
    - ``UploadTask`` for multipart document uploads
    - ``Paginator`` for iterating list/search endpoints

Design Decisions:
    - Parameters and filters are validated before any request; malformed
      input raises ``ValidationError`` and nothing is sent
    - ``download_document`` performs no I/O; the request starts on first
      consumption of the returned session
    - ``upload_document`` starts the upload immediately and returns the
      task; await ``task.finished`` for the created document
    - Context manager pattern ensures the connection pool is closed

See Also:
    - DownloadSession: Abortable streaming download
    - Paginator: Cursor iteration over ``Page`` results
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from functools import partial
from typing import Any

import pydantic

from ..core.auth import TokenProvider, as_token_provider
from ..core.config import ParcelConfig
from ..core.exceptions import ValidationError
from ..models.document import (
    AccessEvent,
    AccessLogFilter,
    Document,
    DocumentId,
    DocumentSearchParams,
    DocumentUpdateParams,
    UploadParams,
)
from ..models.identity import GrantedPermissionsFilter, Identity, IdentityId, Permission
from ..models.page import Page, PageParams
from ..runtime.pagination import Paginator, filter_values, validate_filter
from ..runtime.rest import HTTPClient, RedirectResolver, RESTTransport, RestRunner
from ..runtime.transfer import DownloadSession, MultipartUploadEncoder, UploadTask
from ..runtime.transfer.multipart import DataSource
from .adapters import EmptyAdapter, ModelAdapter, PageAdapter
from .endpoints import (
    current_identity_spec,
    delete_document_spec,
    document_history_spec,
    get_document_spec,
    get_identity_spec,
    granted_permissions_spec,
    search_documents_spec,
    update_document_spec,
)

logger = logging.getLogger(__name__)

Filter = PageParams | Mapping[str, Any] | None


def _require_id(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip() or "/" in value:
        raise ValidationError(f"{name} must be a non-empty id, got {value!r}")
    return value


def _validate(model: type[pydantic.BaseModel], value: Any) -> Any:
    if value is None:
        return model()
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid {model.__name__}: {e}") from e


class Parcel:
    """Async client for the Parcel document storage API.

    Example:
        >>> async with Parcel(token) as parcel:
        ...     task = parcel.upload_document(b"hello", {"details": {"title": "greeting"}})
        ...     document = await task.finished
        ...     async for chunk in parcel.download_document(document.id):
        ...         print(chunk)
    """

    def __init__(
        self,
        token: str | TokenProvider,
        *,
        config: ParcelConfig | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: Bearer token or a provider of fresh tokens
            config: Endpoint and transfer settings (defaults to production URLs)
        """
        self.config = config or ParcelConfig()
        self._http = HTTPClient(
            timeout=self.config.timeout, token_provider=as_token_provider(token)
        )
        self._runner = RestRunner(RESTTransport(self.config.api_url, http=self._http))
        self._resolver = RedirectResolver(self._http)
        self._closed = False

    @property
    def http(self) -> HTTPClient:
        return self._http

    # --- Documents -----------------------------------------------------------

    def upload_document(
        self,
        data: DataSource,
        params: UploadParams | Mapping[str, Any] | None = None,
    ) -> UploadTask:
        """Start uploading a document.

        Must be called from a running event loop; the upload proceeds in the
        background.

        Args:
            data: Bytes, str, an (async) iterable of bytes or a readable file
            params: ``details``, ``owner`` and ``to_app`` of the new document

        Returns:
            Task whose ``finished`` future resolves to the created Document

        Raises:
            ValidationError: Malformed params or unsupported data type
        """
        upload = _validate(UploadParams, params)
        try:
            encoder = MultipartUploadEncoder(
                data, upload.to_metadata(), chunk_size=self.config.chunk_size
            )
        except TypeError as e:
            raise ValidationError(str(e)) from e
        return UploadTask(self._http, self.config.storage_url, encoder)

    def download_document(self, document_id: DocumentId) -> DownloadSession:
        """Prepare a download of the document's bytes (no request is sent yet)."""
        document_id = _require_id(document_id, "document_id")
        return DownloadSession(
            self._resolver,
            f"{self.config.storage_url}/{document_id}/download",
            document_id=document_id,
            chunk_size=self.config.chunk_size,
        )

    async def get_document(self, document_id: DocumentId) -> Document:
        return await self._runner.run(
            spec=get_document_spec(),
            adapter=ModelAdapter(Document),
            params={"document_id": _require_id(document_id, "document_id")},
        )

    async def update_document(
        self,
        document_id: DocumentId,
        update: DocumentUpdateParams | Mapping[str, Any],
    ) -> Document:
        """Replace the writable fields of a document and return the result."""
        params = {
            "document_id": _require_id(document_id, "document_id"),
            "update": _validate(DocumentUpdateParams, update).model_dump(exclude_none=True),
        }
        return await self._runner.run(
            spec=update_document_spec(), adapter=ModelAdapter(Document), params=params
        )

    async def delete_document(self, document_id: DocumentId) -> None:
        await self._runner.run(
            spec=delete_document_spec(),
            adapter=EmptyAdapter(),
            params={"document_id": _require_id(document_id, "document_id")},
        )

    async def search_documents(self, filter: Filter = None) -> Page[Document]:
        """Fetch one page of documents matching ``filter``."""
        values = filter_values(validate_filter(filter, DocumentSearchParams))
        return await self._search_page(values)

    def paginate_documents(self, filter: Filter = None) -> AsyncIterator[Document]:
        """Iterate every document matching ``filter`` across pages."""
        paginator: Paginator[Document] = Paginator(
            self._search_page,
            endpoint_id="search_documents",
            filter_model=DocumentSearchParams,
        )
        return paginator.paginate(filter)

    async def get_document_history(
        self, document_id: DocumentId, filter: Filter = None
    ) -> Page[AccessEvent]:
        """Fetch one page of a document's access log."""
        document_id = _require_id(document_id, "document_id")
        values = filter_values(validate_filter(filter, AccessLogFilter))
        return await self._history_page(document_id, values)

    def paginate_document_history(
        self, document_id: DocumentId, filter: Filter = None
    ) -> AsyncIterator[AccessEvent]:
        paginator: Paginator[AccessEvent] = Paginator(
            partial(self._history_page, _require_id(document_id, "document_id")),
            endpoint_id="document_history",
            filter_model=AccessLogFilter,
        )
        return paginator.paginate(filter)

    async def _search_page(self, values: dict[str, Any]) -> Page[Document]:
        return await self._runner.run(
            spec=search_documents_spec(),
            adapter=PageAdapter(Document),
            params={"filter": values},
        )

    async def _history_page(
        self, document_id: DocumentId, values: dict[str, Any]
    ) -> Page[AccessEvent]:
        return await self._runner.run(
            spec=document_history_spec(),
            adapter=PageAdapter(AccessEvent),
            params={"document_id": document_id, "filter": values},
        )

    # --- Identities ----------------------------------------------------------

    async def get_current_identity(self) -> Identity:
        """Identity the client's token belongs to."""
        return await self._runner.run(
            spec=current_identity_spec(), adapter=ModelAdapter(Identity), params={}
        )

    async def get_identity(self, identity_id: IdentityId) -> Identity:
        return await self._runner.run(
            spec=get_identity_spec(),
            adapter=ModelAdapter(Identity),
            params={"identity_id": _require_id(identity_id, "identity_id")},
        )

    async def list_granted_permissions(
        self, identity_id: IdentityId, filter: Filter = None
    ) -> Page[Permission]:
        """Fetch one page of permissions the identity has granted."""
        identity_id = _require_id(identity_id, "identity_id")
        values = filter_values(validate_filter(filter, GrantedPermissionsFilter))
        return await self._permissions_page(identity_id, values)

    def paginate_granted_permissions(
        self, identity_id: IdentityId, filter: Filter = None
    ) -> AsyncIterator[Permission]:
        paginator: Paginator[Permission] = Paginator(
            partial(self._permissions_page, _require_id(identity_id, "identity_id")),
            endpoint_id="granted_permissions",
            filter_model=GrantedPermissionsFilter,
        )
        return paginator.paginate(filter)

    async def _permissions_page(
        self, identity_id: IdentityId, values: dict[str, Any]
    ) -> Page[Permission]:
        return await self._runner.run(
            spec=granted_permissions_spec(),
            adapter=PageAdapter(Permission),
            params={"identity_id": identity_id, "filter": values},
        )

    # --- Lifecycle -----------------------------------------------------------

    async def close(self) -> None:
        """Close the client and its connection pool."""
        if self._closed:
            return
        self._closed = True
        logger.debug("Closing Parcel client")
        await self._http.close()

    async def __aenter__(self) -> Parcel:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
