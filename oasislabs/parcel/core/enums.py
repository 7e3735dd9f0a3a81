"""Enumerations shared across the transfer runtime."""

from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    """Lifecycle of a download session.

    ``IDLE`` until the first pull or pipe, ``ACTIVE`` while streaming, then
    exactly one of the terminal states.
    """

    IDLE = "idle"
    ACTIVE = "active"
    DONE = "done"
    ABORTED = "aborted"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.DONE, SessionState.ABORTED, SessionState.FAILED)


REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})
