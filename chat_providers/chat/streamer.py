"""Conversation streamer.

``ConversationStreamer`` drives one streaming request at a time: it picks the
adapter for the provider tag, normalizes the history, refuses image input for
model families the profile marks as text-only (before any network call),
forwards every token to the caller's sink in order and accumulates them into
a local buffer.

On completion the buffer becomes the immutable ``StreamResult.text``, which is
exactly the concatenation of the forwarded tokens. On failure the partial
buffer is discarded and the error propagates. An aborted request returns what
was delivered before the abort with ``state`` set to ``ABORTED``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

from ..base.cancellation import CancellationToken
from ..base.errors import ErrorCode, ProviderError, ProviderRequestError, UnsupportedCapabilityError
from ..base.factory import UnknownProviderError
from ..base.interfaces import ProviderAdapterProtocol
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import Message, ModelCatalogEntry
from ..base.streaming import StreamState, TokenSink, forward_tokens
from ..config.defaults import DEFAULT_PROVIDER
from .normalizer import MessageHistoryNormalizer, MessageLike
from .roles import assistant_role_tag

_logger = get_logger("chat.streamer")


@dataclass(frozen=True)
class StreamResult:
    """Finished reply of one request.

    Attributes:
        text: Concatenation of every delivered token.
        model_id: Model the request was sent to.
        provider: Provider tag of the adapter used.
        role_tag: Transcript role for the reply (``ai-<model-name>``).
        state: ``COMPLETED`` or ``ABORTED``.
    """

    text: str
    model_id: str
    provider: str
    role_tag: str
    state: StreamState

    @property
    def aborted(self) -> bool:
        return self.state is StreamState.ABORTED


class ConversationStreamer:
    """Stream conversation replies through a set of provider adapters."""

    def __init__(
        self,
        adapters: Mapping[str, ProviderAdapterProtocol],
        default_provider: str = DEFAULT_PROVIDER,
        *,
        normalizer: Optional[MessageHistoryNormalizer] = None,
        system_prompt: str = "",
    ) -> None:
        self._adapters = {k.lower(): v for k, v in adapters.items()}
        self.default_provider = default_provider.lower()
        self.normalizer = normalizer or MessageHistoryNormalizer()
        self.system_prompt = system_prompt
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def adapter_for(self, provider: Optional[str] = None) -> ProviderAdapterProtocol:
        name = (provider or self.default_provider).lower()
        try:
            return self._adapters[name]
        except KeyError:
            raise UnknownProviderError(f"No adapter registered for provider '{name}'") from None

    def _check_images(self, adapter: ProviderAdapterProtocol, model: str, messages: List[Message]) -> None:
        if adapter.profile.accepts_image_input(model):
            return
        if any(m.has_image() for m in messages):
            raise UnsupportedCapabilityError(
                code=ErrorCode.UNSUPPORTED,
                message=f"model '{model}' does not accept image input",
                provider=adapter.provider_name,
                model=model,
            )

    def stream(
        self,
        messages: Iterable[MessageLike],
        *,
        model_id: Optional[str] = None,
        provider: Optional[str] = None,
        system_prompt: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
        on_token: Optional[TokenSink] = None,
        abort: Optional[CancellationToken] = None,
        model_name: Optional[str] = None,
    ) -> StreamResult:
        """Stream a reply to ``messages`` and return the accumulated result.

        Raises ``RuntimeError`` when another request is in flight on this
        instance, ``UnsupportedCapabilityError`` for image input the model
        cannot take, and the adapter's ``ProviderRequestError`` on failure.
        """
        if self._busy:
            raise RuntimeError("ConversationStreamer handles one request at a time")
        adapter = self.adapter_for(provider)
        model = model_id or adapter.default_model()
        if not model:
            raise ProviderRequestError(
                code=ErrorCode.VALIDATION,
                message="no model id given and no default model configured",
                provider=adapter.provider_name,
            )
        normalized = self.normalizer.normalize(messages)
        self._check_images(adapter, model, normalized)

        ctx = LogContext(provider=adapter.provider_name, model=model)
        buffer: List[str] = []

        def _sink(token: str) -> None:
            buffer.append(token)
            if on_token is not None:
                on_token(token)

        self._busy = True
        try:
            tokens = adapter.iter_conversation(
                self.system_prompt if system_prompt is None else system_prompt,
                normalized,
                model,
                max_output_tokens,
                abort,
            )
            outcome = forward_tokens(tokens, _sink)
        except ProviderError as err:
            buffer.clear()
            normalized_log_event(
                _logger,
                "chat.stream.error",
                ctx,
                phase="mid_stream",
                error_code=err.code.value,
                emitted=False,
                level=logging.ERROR,
            )
            raise
        except Exception:
            buffer.clear()
            raise
        finally:
            self._busy = False

        text = "".join(buffer)
        normalized_log_event(
            _logger,
            "chat.stream.end",
            ctx,
            phase="finalize",
            emitted=bool(buffer),
            emitted_count=len(buffer),
            state=outcome.state.value,
        )
        return StreamResult(
            text=text,
            model_id=model,
            provider=adapter.provider_name,
            role_tag=assistant_role_tag(model_name or model),
            state=outcome.state,
        )

    def send(
        self,
        user_text: str,
        history: Iterable[MessageLike] = (),
        *,
        model_id: Optional[str] = None,
        provider: Optional[str] = None,
        catalog_entry: Optional[ModelCatalogEntry] = None,
        max_output_tokens: Optional[int] = None,
        on_token: Optional[TokenSink] = None,
        abort: Optional[CancellationToken] = None,
    ) -> Optional[StreamResult]:
        """Send raw user input as a new ``user`` turn after ``history``.

        The input is trimmed; empty input sends nothing and returns ``None``.
        The reply's ``role_tag`` uses the catalogue display name when an entry
        is given. ``history`` itself is left untouched.
        """
        text = (user_text or "").strip()
        if not text:
            return None
        if catalog_entry is not None:
            model_id = model_id or catalog_entry.id
            provider = provider or catalog_entry.provider
            if max_output_tokens is None:
                max_output_tokens = catalog_entry.max_output_tokens
        messages: List[MessageLike] = list(history)
        messages.append(Message(role="user", content=text))
        return self.stream(
            messages,
            model_id=model_id,
            provider=provider,
            max_output_tokens=max_output_tokens,
            on_token=on_token,
            abort=abort,
            model_name=catalog_entry.name if catalog_entry is not None else None,
        )


__all__ = ["ConversationStreamer", "StreamResult"]
