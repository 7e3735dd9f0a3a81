"""REST runtime abstractions."""

from .http_client import HTTPClient, extract_error_detail, raise_for_status
from .redirect import RedirectResolver
from .runner import ResponseAdapter, RestEndpointSpec, RestRunner
from .transport import RESTTransport

__all__ = [
    "HTTPClient",
    "RedirectResolver",
    "RESTTransport",
    "RestRunner",
    "RestEndpointSpec",
    "ResponseAdapter",
    "extract_error_detail",
    "raise_for_status",
]
