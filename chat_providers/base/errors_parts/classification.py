"""Map arbitrary exceptions onto ``ErrorCode`` and the provider error family.

The ``openai`` SDK and ``httpx`` raise unrelated exception hierarchies; both
are folded into one taxonomy here. Order of evidence: an existing
``ProviderError``, timeout types, an HTTP status found on the exception or its
response, connection-level types, and finally keywords in the message.
"""
from __future__ import annotations

from typing import Optional, Tuple

import httpx
import openai

from .error_code import ErrorCode
from .provider_error import ProviderError, ProviderRequestError, TransportError

_TIMEOUT_TYPES: Tuple[type, ...] = (TimeoutError, openai.APITimeoutError, httpx.TimeoutException)
_TRANSPORT_TYPES: Tuple[type, ...] = (
    openai.APIConnectionError,
    openai.APIStatusError,
    httpx.TransportError,
    httpx.HTTPStatusError,
    ConnectionError,
)

# First matching row wins.
_KEYWORDS: Tuple[Tuple[ErrorCode, Tuple[str, ...]], ...] = (
    (ErrorCode.TIMEOUT, ("timeout", "timed out")),
    (ErrorCode.AUTH, ("unauthorized", "api key", "forbidden")),
    (ErrorCode.UNSUPPORTED, ("unsupported", "not supported")),
    (ErrorCode.NOT_FOUND, ("not found", "does not exist")),
    (ErrorCode.UNAVAILABLE, ("unavailable",)),
    (ErrorCode.VALIDATION, ("invalid", "malformed")),
    (ErrorCode.SERVER_ERROR, ("server error", "internal error")),
)


def _status_of(exc: object) -> Optional[int]:
    """Return the HTTP status carried by ``exc`` or its ``response``, if any."""
    candidates = (
        getattr(exc, "status_code", None),
        getattr(exc, "status", None),
        getattr(getattr(exc, "response", None), "status_code", None),
    )
    for value in candidates:
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    return None


def _code_from_message(text: str) -> ErrorCode:
    if "rate" in text and "limit" in text:
        return ErrorCode.RATE_LIMIT
    for code, words in _KEYWORDS:
        if any(w in text for w in words):
            return code
    return ErrorCode.UNKNOWN


def is_transport_failure(exc: BaseException) -> bool:
    """Return True for network and HTTP-level failures."""
    return isinstance(exc, _TRANSPORT_TYPES)


def classify_exception(exc: BaseException) -> ErrorCode:
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, _TIMEOUT_TYPES):
        return ErrorCode.TIMEOUT
    status = _status_of(exc)
    if status is not None:
        mapped = ErrorCode.from_http_status(status)
        if mapped is not None:
            return mapped
    if is_transport_failure(exc):
        return ErrorCode.TRANSPORT
    return _code_from_message(str(exc).lower())


def wrap_exception(exc: Exception, *, provider: str, model: Optional[str]) -> ProviderError:
    """Return ``exc`` as a provider error; existing ``ProviderError`` passes through."""
    if isinstance(exc, ProviderError):
        return exc
    code = classify_exception(exc)
    cls = TransportError if is_transport_failure(exc) else ProviderRequestError
    return cls(code=code, message=str(exc), provider=provider, model=model, retryable=code.retryable, raw=exc)


__all__ = ["classify_exception", "is_transport_failure", "wrap_exception"]
