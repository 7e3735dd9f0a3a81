"""Runtime layer: HTTP transport, transfers and pagination."""

from .pagination import Paginator
from .rest import HTTPClient, RedirectResolver, RESTTransport, RestEndpointSpec, RestRunner
from .transfer import DownloadSession, MultipartUploadEncoder, UploadTask

__all__ = [
    "DownloadSession",
    "HTTPClient",
    "MultipartUploadEncoder",
    "Paginator",
    "RedirectResolver",
    "RESTTransport",
    "RestEndpointSpec",
    "RestRunner",
    "UploadTask",
]
