"""Unit tests for the exception hierarchy.

Tests focus on meaningful behavior, not just field access.
"""

from oasislabs.parcel.core import (
    AbortError,
    HttpStatusError,
    NetworkError,
    PaginationError,
    ParcelError,
    SessionConsumedError,
    SinkError,
    SourceError,
    TransferError,
    ValidationError,
)


def test_http_status_error_carries_status_and_detail():
    """HttpStatusError keeps the status code and server detail."""
    error = HttpStatusError("error in document download (status 404)", 404, "not found")
    assert error.status_code == 404
    assert error.detail == "not found"
    assert isinstance(error, ParcelError)


def test_abort_error_default_message():
    """AbortError uses the conventional abort message."""
    assert str(AbortError()) == "The operation was aborted"


def test_sink_and_source_errors_are_transfer_errors():
    """Caller-side I/O failures share a base distinct from NetworkError."""
    original = OSError("disk full")
    sink = SinkError("disk full", original=original)
    source = SourceError("boom")

    assert sink.original is original
    assert source.original is None
    for error in (sink, source):
        assert isinstance(error, TransferError)
        assert not isinstance(error, NetworkError)


def test_pagination_error_keeps_token():
    """PaginationError reports the repeated token."""
    error = PaginationError("repeated", page_token="abc")
    assert error.page_token == "abc"


def test_all_errors_derive_from_parcel_error():
    """Every library error can be caught with ParcelError."""
    for cls in (NetworkError, SessionConsumedError, ValidationError):
        assert issubclass(cls, ParcelError)
