"""Exception family raised by adapters and the chat layer.

Three branches matter to callers:

* ``ProviderRequestError``: a request reached the provider path and failed
  (bad key, invalid parameters, server error).
* ``TransportError``: the API could not be reached or answered with an HTTP
  failure. It subclasses ``ProviderRequestError``, so one ``except`` clause
  covers both.
* ``UnsupportedCapabilityError``: refused locally, before any network call,
  because the profile says the model cannot take the request (image input).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Base provider failure.

    ``raw`` keeps the SDK or HTTP exception that caused it, when there is one.
    ``retryable`` is advisory; no retries happen inside this package.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None

    def __str__(self) -> str:
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


class ProviderRequestError(ProviderError):
    pass


class TransportError(ProviderRequestError):
    pass


class UnsupportedCapabilityError(ProviderError):
    pass


__all__ = [
    "ProviderError",
    "ProviderRequestError",
    "TransportError",
    "UnsupportedCapabilityError",
]
