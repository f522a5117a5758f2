"""chat_providers package

Uniform chat interface over several OpenAI-compatible LLM backends.

Purpose:
    Provide a small, stable API for one-shot and streamed chat completions in
    which per-provider quirks (system-role support, disabled temperature,
    disabled streaming, token counting, model catalogue filtering) are
    expressed as profile data consumed by one shared adapter engine.

Public API (re-exported):
    - Version: ``__version__``
    - Factory: :func:`create_adapter`, :class:`ProviderFactory`
    - Engine: :class:`ProviderAdapter`, :class:`ProviderProfile`
    - Chat layer: :class:`ConversationStreamer`, :class:`MessageHistoryNormalizer`
    - Errors: :class:`ProviderError` and its request/transport/capability
      subclasses, :class:`ErrorCode`
"""

from .base.adapter import ProviderAdapter
from .base.cancellation import AbortSignal, CancellationToken
from .base.capabilities import ProviderProfile
from .base.dto import AdapterParams
from .base.errors import (
    ErrorCode,
    ProviderError,
    ProviderRequestError,
    TransportError,
    UnsupportedCapabilityError,
)
from .base.factory import ProviderFactory, UnknownProviderError, create_adapter
from .base.models import ContentPart, Message, ModelCatalogEntry, Pricing
from .base.streaming import StreamState
from .chat import (
    ConversationStreamer,
    DirectoryAttachmentStore,
    MessageHistoryNormalizer,
    StreamResult,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ProviderAdapter",
    "ProviderProfile",
    "AdapterParams",
    "AbortSignal",
    "CancellationToken",
    "ErrorCode",
    "ProviderError",
    "ProviderRequestError",
    "TransportError",
    "UnsupportedCapabilityError",
    "ProviderFactory",
    "UnknownProviderError",
    "create_adapter",
    "ContentPart",
    "Message",
    "ModelCatalogEntry",
    "Pricing",
    "StreamState",
    "ConversationStreamer",
    "DirectoryAttachmentStore",
    "MessageHistoryNormalizer",
    "StreamResult",
]
