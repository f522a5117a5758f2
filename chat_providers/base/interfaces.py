"""
Provider-agnostic adapter interface.

``ProviderAdapterProtocol`` is the contract the chat layer depends on. The
shared ``ProviderAdapter`` engine implements it; tests and host applications
may supply their own implementations.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Protocol, Sequence, runtime_checkable

from .cancellation import CancellationToken
from .capabilities import ProviderProfile
from .models import Message, ModelCatalogEntry
from .streaming import TokenSink


@runtime_checkable
class ProviderAdapterProtocol(Protocol):
    """Uniform surface over one LLM backend."""

    @property
    def provider_name(self) -> str:
        """Canonical provider identifier, e.g. ``"openai"``."""
        ...

    @property
    def profile(self) -> ProviderProfile:
        """Capability data consulted before every request."""
        ...

    def default_model(self) -> Optional[str]:
        """Model used when a call does not name one."""
        ...

    def complete_once(
        self,
        system_prompt: str,
        user_message: str,
        model_id: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """Return the full assistant text of a non-streaming request.

        Raises ``ProviderRequestError`` (``TransportError`` for network/HTTP
        failure) unchanged.
        """
        ...

    def stream_with_callback(
        self,
        system_prompt: str,
        user_message: str,
        model_id: Optional[str],
        max_output_tokens: Optional[int],
        on_token: TokenSink,
        abort: Optional[CancellationToken] = None,
    ) -> None:
        ...

    def stream_conversation(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        model_id: Optional[str],
        max_output_tokens: Optional[int],
        on_token: TokenSink,
        abort: Optional[CancellationToken] = None,
    ) -> None:
        """Stream a reply to a normalized history; setup failures are re-raised."""
        ...

    def iter_conversation(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        model_id: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
        abort: Optional[CancellationToken] = None,
    ) -> Iterator[str]:
        ...

    def list_models(self) -> List[ModelCatalogEntry]:
        """Return the filtered, ordered catalogue; ``[]`` on failure."""
        ...

    def validate_api_key(self, key: str, base_url: Optional[str] = None) -> bool:
        """Return True only when a probe request with ``key`` succeeds."""
        ...

    def get_token_count(self, text: str, model_id: Optional[str] = None) -> int:
        ...


__all__ = ["ProviderAdapterProtocol"]
