"""
Providers Base Package

Exports the provider-agnostic contract, DTOs, capability profiles and the
shared adapter engine:

- Interfaces: ``ProviderAdapterProtocol``
- Models (DTOs): ``Message``, ``ContentPart``, ``ModelCatalogEntry``
- Capabilities: ``ProviderProfile`` and its loaders
- Engine: ``ProviderAdapter``
- Factory: adapter creation by canonical name
"""

from .adapter import ProviderAdapter
from .cancellation import AbortSignal, CancellationToken
from .capabilities import ProviderProfile, available_profiles, load_profile
from .dto import AdapterParams
from .errors import (
    ErrorCode,
    ProviderError,
    ProviderRequestError,
    TransportError,
    UnsupportedCapabilityError,
    classify_exception,
)
from .factory import ProviderFactory, UnknownProviderError, create_adapter
from .interfaces import ProviderAdapterProtocol
from .models import ContentPart, Message, ModelCatalogEntry, Pricing
from .streaming import StreamOutcome, StreamState, TokenStream
from .tokens import count_tokens, estimate_tokens

__all__ = [
    "ProviderAdapter",
    "ProviderAdapterProtocol",
    "AbortSignal",
    "CancellationToken",
    "ProviderProfile",
    "available_profiles",
    "load_profile",
    "AdapterParams",
    "ErrorCode",
    "ProviderError",
    "ProviderRequestError",
    "TransportError",
    "UnsupportedCapabilityError",
    "classify_exception",
    "ProviderFactory",
    "UnknownProviderError",
    "create_adapter",
    "ContentPart",
    "Message",
    "ModelCatalogEntry",
    "Pricing",
    "StreamOutcome",
    "StreamState",
    "TokenStream",
    "count_tokens",
    "estimate_tokens",
]
