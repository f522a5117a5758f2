"""Unified provider error taxonomy public surface.

This module re-exports the implementations under
``chat_providers.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import (
    ProviderError,
    ProviderRequestError,
    TransportError,
    UnsupportedCapabilityError,
)
from .errors_parts.classification import classify_exception, is_transport_failure, wrap_exception

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ProviderRequestError",
    "TransportError",
    "UnsupportedCapabilityError",
    "classify_exception",
    "is_transport_failure",
    "wrap_exception",
]
