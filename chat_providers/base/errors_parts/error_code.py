"""Failure categories shared by every adapter.

``ErrorCode`` values appear verbatim as ``error_code`` in log events, so they
are lowercase snake_case and must not be renamed.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSPORT = "transport"
    TRANSIENT = "transient"
    UNSUPPORTED = "unsupported"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"

    @property
    def retryable(self) -> bool:
        """Whether a caller-side retry button makes sense for this failure."""
        return self in _RETRYABLE

    @classmethod
    def from_http_status(cls, status: int) -> Optional["ErrorCode"]:
        """Map an HTTP status to a code; ``None`` for statuses without a mapping."""
        if status in (401, 403):
            return cls.AUTH
        if status in (400, 422):
            return cls.VALIDATION
        if status in (408, 504):
            return cls.TIMEOUT
        return {
            404: cls.NOT_FOUND,
            429: cls.RATE_LIMIT,
            500: cls.SERVER_ERROR,
            502: cls.TRANSIENT,
            503: cls.UNAVAILABLE,
        }.get(status)


_RETRYABLE = frozenset({ErrorCode.TRANSIENT, ErrorCode.RATE_LIMIT, ErrorCode.TIMEOUT, ErrorCode.TRANSPORT})

__all__ = ["ErrorCode"]
