"""Structured logging for transfers and pagination.

This module provides telemetry hooks for downloads, uploads and page
fetches, emitting event-style log records with structured ``extra`` fields.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_download_started(*, url: str) -> None:
    logger.debug("download_started", extra={"url": url})


def log_redirect_followed(*, method: str, url: str, location: str, status: int) -> None:
    """Log a followed redirect hop.

    Args:
        method: HTTP method re-issued at the new location
        url: Original request URL
        location: Resolved redirect target
        status: Redirect status code (301/302/303/307/308)
    """
    logger.debug(
        "redirect_followed",
        extra={"method": method, "url": url, "location": location, "status": status},
    )


def log_download_completed(*, url: str, bytes_transferred: int, latency_ms: float) -> None:
    logger.info(
        "download_completed",
        extra={"url": url, "bytes_transferred": bytes_transferred, "latency_ms": latency_ms},
    )


def log_download_aborted(*, url: str, bytes_transferred: int) -> None:
    logger.info(
        "download_aborted",
        extra={"url": url, "bytes_transferred": bytes_transferred},
    )


def log_download_failed(
    *,
    url: str,
    bytes_transferred: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log a download that failed after (possibly) delivering a prefix.

    Args:
        url: Download URL
        bytes_transferred: Bytes delivered to the consumer before the failure
        error_type: Exception class name
        error_message: Exception message
    """
    logger.error(
        "download_failed",
        extra={
            "url": url,
            "bytes_transferred": bytes_transferred,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_upload_completed(*, document_id: str, bytes_sent: int, latency_ms: float) -> None:
    logger.info(
        "upload_completed",
        extra={"document_id": document_id, "bytes_sent": bytes_sent, "latency_ms": latency_ms},
    )


def log_upload_failed(*, bytes_sent: int, error_type: str, error_message: str) -> None:
    logger.error(
        "upload_failed",
        extra={
            "bytes_sent": bytes_sent,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_page_fetched(
    *,
    endpoint_id: str,
    page_index: int,
    results: int,
    has_next: bool,
    latency_ms: float | None = None,
) -> None:
    """Log a single fetched page.

    Args:
        endpoint_id: Endpoint identifier
        page_index: Zero-based index of the page within the cursor
        results: Number of records in the page
        has_next: Whether the page carried a continuation token
        latency_ms: Request latency in milliseconds (optional)
    """
    logger.debug(
        "page_fetched",
        extra={
            "endpoint_id": endpoint_id,
            "page_index": page_index,
            "results": results,
            "has_next": has_next,
            "latency_ms": latency_ms,
        },
    )


def log_pagination_complete(*, endpoint_id: str, pages: int, total_results: int) -> None:
    logger.info(
        "pagination_complete",
        extra={"endpoint_id": endpoint_id, "pages": pages, "total_results": total_results},
    )
