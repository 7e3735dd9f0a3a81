"""Custom exception hierarchy."""

from __future__ import annotations


class ParcelError(Exception):
    """Base exception for all library errors."""

    pass


class NetworkError(ParcelError):
    """Transport-level failure (connection reset, truncated payload, timeout).

    Never retried by the library; retry policy belongs to the caller.
    """

    pass


class HttpStatusError(ParcelError):
    """Server answered with a status the operation does not accept."""

    def __init__(
        self,
        message: str,
        status_code: int,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class AbortError(ParcelError):
    """Operation was aborted by the caller."""

    def __init__(self, message: str = "The operation was aborted") -> None:
        super().__init__(message)


class TransferError(ParcelError):
    """Failure in caller-supplied I/O during a transfer."""

    def __init__(self, message: str, original: BaseException | None = None) -> None:
        super().__init__(message)
        self.original = original


class SinkError(TransferError):
    """Caller-supplied sink rejected a chunk during ``pipe_to``."""

    pass


class SourceError(TransferError):
    """Caller-supplied data source failed while an upload was streaming."""

    pass


class SessionConsumedError(ParcelError):
    """A download session was consumed more than once."""

    pass


class PaginationError(ParcelError):
    """Server returned a page token that the cursor already consumed."""

    def __init__(self, message: str, page_token: str | None = None) -> None:
        super().__init__(message)
        self.page_token = page_token


class ValidationError(ParcelError):
    """Malformed parameters, rejected before any request is sent."""

    pass
