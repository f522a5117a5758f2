"""Shared provider adapter engine.

One ``ProviderAdapter`` class serves every OpenAI-compatible backend. The
per-provider differences live in a ``ProviderProfile`` (data) consulted before
each request:

- system prompt sent as ``system`` or, for models rejecting that role, ``user``
- streaming disabled: one-shot call delivered as a single synthetic token
- temperature omitted for models that reject it
- ``max_completion_tokens`` instead of ``max_tokens`` where required
- catalogue exclusion set, priority order, limit overrides and pricing

Streaming model
---------------
``iter_conversation`` returns a single-reader ``TokenStream``. The request
walks ``Idle -> Building -> Sending -> StreamingTokens* -> Completed`` or ends
in ``Aborted``/``Failed``; each transition is logged (``stream.build``,
``stream.start``, ``stream.delta`` at debug, ``stream.end``,
``stream.aborted``, ``stream.error``). The abort signal is checked before every
forward; once it is observed nothing more is delivered and the SDK stream is
closed best-effort. The callback forms are thin wrappers over the channel.

Failure semantics
-----------------
- One-shot and streaming setup failures raise ``ProviderRequestError``
  (``TransportError`` for network/HTTP failure) after logging.
- ``list_models`` returns ``[]`` on transport failure.
- ``validate_api_key`` returns ``False`` on any failure; it never raises.
- Token counting falls back to the shared estimator silently.
"""
from __future__ import annotations

import logging
from contextlib import ExitStack, suppress
from typing import Any, Dict, Iterator, List, Optional, Sequence

import httpx

from ..config.defaults import (
    HTTP_TIMEOUT_SECONDS,
    MESSAGE_TOKEN_OVERHEAD,
    OPENAI_DEFAULT_BASE_URL,
    VALIDATION_TIMEOUT_SECONDS,
)
from .adapter_parts import (
    ClientFactory,
    build_catalog,
    build_chat_params,
    build_failure,
    build_wire_messages,
    default_client_factory,
    extract_openai_text,
    fetch_remote_models,
    invoke_create,
)
from .cancellation import CancellationToken
from .capabilities import ProviderProfile
from .dto import AdapterParams
from .errors import ErrorCode, ProviderError, ProviderRequestError, classify_exception, wrap_exception
from .http import get_httpx_client
from .logging import LogContext, get_logger, log_event, normalized_log_event
from .models import Message, ModelCatalogEntry
from .streaming import (
    StreamOutcome,
    StreamState,
    TokenSink,
    TokenStream,
    extract_delta_text,
    forward_tokens,
    register_stream_cleanup,
)
from .tokens import NativeCounter, TiktokenCounter, count_tokens


def _usage_tokens(resp: Any) -> Optional[Dict[str, Optional[int]]]:
    usage = getattr(resp, "usage", None)
    if usage is None:
        return None
    return {
        "prompt": getattr(usage, "prompt_tokens", None),
        "completion": getattr(usage, "completion_tokens", None),
        "total": getattr(usage, "total_tokens", None),
    }


class ProviderAdapter:
    """Capability-driven adapter over an OpenAI-compatible Chat Completions API.

    Parameters
    ----------
    profile:
        Provider capability data.
    params:
        Read-only configuration (API key, base URL, temperature, default model).
    client:
        Ready SDK client; built lazily through ``client_factory`` when omitted.
    client_factory:
        Builds SDK clients (also used for key validation probes).
    http_client:
        ``httpx.Client`` used for the catalogue; defaults to the shared pool.
    token_counter:
        Native token counter; defaults to tiktoken with the profile encoding.
    """

    def __init__(
        self,
        profile: ProviderProfile,
        params: Optional[AdapterParams] = None,
        *,
        client: Any = None,
        client_factory: Optional[ClientFactory] = None,
        http_client: Optional[httpx.Client] = None,
        token_counter: Optional[NativeCounter] = None,
    ) -> None:
        self._profile = profile
        self._params = params or AdapterParams(provider=profile.provider)
        self._client = client
        self._client_factory = client_factory or default_client_factory
        self._http_client = http_client
        self._token_counter = token_counter or TiktokenCounter(profile.tiktoken_encoding)
        self._logger = get_logger(f"adapter.{profile.provider}")

    # ------------------------------------------------------------------ props
    @property
    def provider_name(self) -> str:
        return self._profile.provider

    @property
    def profile(self) -> ProviderProfile:
        return self._profile

    @property
    def params(self) -> AdapterParams:
        return self._params

    @property
    def base_url(self) -> str:
        return self._params.base_url or OPENAI_DEFAULT_BASE_URL

    def default_model(self) -> Optional[str]:
        return self._params.model or self._profile.default_model

    # ---------------------------------------------------------------- helpers
    def _resolve_model(self, model_id: Optional[str]) -> str:
        model = model_id or self.default_model()
        if not model:
            raise ProviderRequestError(
                code=ErrorCode.VALIDATION,
                message="no model id given and no default model configured",
                provider=self.provider_name,
            )
        return model

    def _ctx(self, model: Optional[str]) -> LogContext:
        return LogContext.for_request(self.provider_name, model)

    def _get_client(self, model: str) -> Any:
        if self._client is None:
            try:
                self._client = self._client_factory(
                    api_key=self._params.api_key,
                    base_url=self._params.base_url,
                    timeout=self._params.timeout_seconds,
                )
            except Exception as exc:  # noqa: BLE001
                code = classify_exception(exc) if self._params.api_key else ErrorCode.AUTH
                raise ProviderRequestError(
                    code=code,
                    message=f"client construction failed: {exc}",
                    provider=self.provider_name,
                    model=model,
                    raw=exc,
                ) from exc
        return self._client

    def _log_failure(self, ctx: LogContext, err: ProviderError, *, phase: str, event: str, emitted: int = 0) -> None:
        normalized_log_event(
            self._logger,
            event,
            ctx,
            phase=phase,
            error_code=err.code.value,
            emitted=emitted,
            level=logging.ERROR,
            failure_class=type(err.raw or err).__name__,
            retryable=err.retryable,
            error=err.message[:260],
        )

    def _fail(self, outcome: StreamOutcome, ctx: LogContext, err: ProviderError, *, phase: str) -> None:
        outcome.error = err
        outcome.advance(StreamState.FAILED)
        self._log_failure(ctx, err, phase=phase, event="stream.error", emitted=outcome.emitted)

    def _mark_aborted(self, outcome: StreamOutcome, ctx: LogContext, reason: Optional[str]) -> None:
        outcome.abort_reason = reason
        outcome.advance(StreamState.ABORTED)
        normalized_log_event(
            self._logger,
            "stream.aborted",
            ctx,
            phase="cancelled",
            error_code=ErrorCode.CANCELLED.value,
            emitted=outcome.emitted,
            reason=reason,
        )

    def _check_abort(self, abort: Optional[CancellationToken], outcome: StreamOutcome, ctx: LogContext) -> bool:
        if abort is not None and abort.cancelled:
            self._mark_aborted(outcome, ctx, abort.reason)
            return True
        return False

    def _http(self) -> httpx.Client:
        if self._http_client is not None:
            return self._http_client
        return get_httpx_client(None, "catalog", timeout=self._params.timeout_seconds or HTTP_TIMEOUT_SECONDS)

    # ------------------------------------------------------------- operations
    def complete_once(
        self,
        system_prompt: str,
        user_message: str,
        model_id: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """Send one request and return the full assistant text."""
        model = self._resolve_model(model_id)
        ctx = self._ctx(model)
        try:
            wire = build_wire_messages(self._profile, model, system_prompt, [Message(role="user", content=user_message)])
            params = build_chat_params(self._profile, model, wire, max_output_tokens, self._params.temperature)
        except Exception as exc:  # noqa: BLE001
            err = build_failure(exc, provider=self.provider_name, model=model)
            self._log_failure(ctx, err, phase="build", event="chat.error")
            raise err from exc
        try:
            resp = invoke_create(self._get_client(model), params, model, self.provider_name)
        except ProviderError as err:
            self._log_failure(ctx, err, phase="start", event="chat.error")
            raise
        text = extract_openai_text(resp)
        normalized_log_event(
            self._logger,
            "chat.end",
            ctx,
            phase="finalize",
            emitted=bool(text),
            tokens=_usage_tokens(resp),
        )
        return text

    def iter_conversation(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        model_id: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
        abort: Optional[CancellationToken] = None,
    ) -> TokenStream:
        """Return the single-reader token channel for one conversation request.

        Nothing is sent until the channel is iterated.
        """
        model = self._resolve_model(model_id)
        outcome = StreamOutcome()
        tokens = self._run_stream(system_prompt, list(messages), model, max_output_tokens, abort, outcome, self._ctx(model))
        return TokenStream(tokens, outcome)

    def stream_conversation(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        model_id: Optional[str],
        max_output_tokens: Optional[int],
        on_token: TokenSink,
        abort: Optional[CancellationToken] = None,
    ) -> None:
        forward_tokens(self.iter_conversation(system_prompt, messages, model_id, max_output_tokens, abort), on_token)

    def stream_with_callback(
        self,
        system_prompt: str,
        user_message: str,
        model_id: Optional[str],
        max_output_tokens: Optional[int],
        on_token: TokenSink,
        abort: Optional[CancellationToken] = None,
    ) -> None:
        messages = [Message(role="user", content=user_message)]
        forward_tokens(self.iter_conversation(system_prompt, messages, model_id, max_output_tokens, abort), on_token)

    def _run_stream(
        self,
        system_prompt: str,
        messages: List[Message],
        model: str,
        max_output_tokens: Optional[int],
        abort: Optional[CancellationToken],
        outcome: StreamOutcome,
        ctx: LogContext,
    ) -> Iterator[str]:
        outcome.advance(StreamState.BUILDING)
        streaming = not self._profile.should_disable_streaming(model)
        normalized_log_event(
            self._logger,
            "stream.build",
            ctx,
            phase="build",
            emitted=False,
            streaming=streaming,
            message_count=len(messages),
        )
        try:
            wire = build_wire_messages(self._profile, model, system_prompt, messages)
            params = build_chat_params(
                self._profile, model, wire, max_output_tokens, self._params.temperature, stream=streaming
            )
        except Exception as exc:  # noqa: BLE001
            err = build_failure(exc, provider=self.provider_name, model=model)
            self._fail(outcome, ctx, err, phase="build")
            raise err from exc
        if self._check_abort(abort, outcome, ctx):
            return

        outcome.advance(StreamState.SENDING)
        with ExitStack() as stack:
            try:
                result = invoke_create(self._get_client(model), params, model, self.provider_name)
            except ProviderError as err:
                self._fail(outcome, ctx, err, phase="start")
                raise
            normalized_log_event(self._logger, "stream.start", ctx, phase="start", emitted=False, streaming=streaming)
            try:
                if not streaming:
                    if self._check_abort(abort, outcome, ctx):
                        return
                    outcome.record_token()
                    yield extract_openai_text(result)
                else:
                    register_stream_cleanup(result, stack)
                    for chunk in result:
                        if self._check_abort(abort, outcome, ctx):
                            return
                        delta = extract_delta_text(chunk)
                        if delta is None:
                            continue
                        outcome.record_token()
                        if self._logger.isEnabledFor(logging.DEBUG):
                            normalized_log_event(
                                self._logger,
                                "stream.delta",
                                ctx,
                                phase="mid_stream",
                                emitted=True,
                                level=logging.DEBUG,
                                delta_len=len(delta),
                            )
                        yield delta
            except GeneratorExit:
                if not outcome.finished:
                    self._mark_aborted(outcome, ctx, "reader closed")
                raise
            except ProviderError as err:
                self._fail(outcome, ctx, err, phase="mid_stream")
                raise
            except Exception as exc:  # noqa: BLE001
                err = wrap_exception(exc, provider=self.provider_name, model=model)
                self._fail(outcome, ctx, err, phase="mid_stream")
                raise err from exc

        outcome.advance(StreamState.COMPLETED)
        normalized_log_event(
            self._logger,
            "stream.end",
            ctx,
            phase="finalize",
            emitted=outcome.emitted > 0,
            emitted_count=outcome.emitted,
            time_to_first_token_ms=outcome.time_to_first_token_ms,
            total_duration_ms=outcome.total_duration_ms,
        )

    def list_models(self) -> List[ModelCatalogEntry]:
        """Fetch, filter and order the provider catalogue; ``[]`` on failure."""
        ctx = LogContext(provider=self.provider_name, model="models")
        try:
            raw = fetch_remote_models(self._http(), self.base_url, self._params.api_key, self._params.headers)
        except (httpx.HTTPError, ValueError) as exc:
            normalized_log_event(
                self._logger,
                "models.list.error",
                ctx,
                phase="start",
                error_code=classify_exception(exc).value,
                emitted=False,
                level=logging.WARNING,
                failure_class=exc.__class__.__name__,
                fallback_used=True,
            )
            return []
        entries = build_catalog(self._profile, raw)
        normalized_log_event(
            self._logger,
            "models.list.end",
            ctx,
            phase="finalize",
            emitted=bool(entries),
            remote_count=len(raw),
            count=len(entries),
        )
        return entries

    def validate_api_key(self, key: str, base_url: Optional[str] = None) -> bool:
        """Send a minimal probe request with ``key``; True only on success."""
        model = self._profile.probe_model or self.default_model()
        ctx = self._ctx(model)
        client: Any = None
        try:
            client = self._client_factory(
                api_key=key,
                base_url=base_url or self.base_url,
                timeout=VALIDATION_TIMEOUT_SECONDS,
                max_retries=0,
            )
            params = build_chat_params(self._profile, model or "", [{"role": "user", "content": "test"}], 1, None)
            client.chat.completions.create(**params)
        except Exception as exc:  # noqa: BLE001 - any failure means the key is unusable
            log_event(
                self._logger,
                "auth.validate",
                ctx,
                valid=False,
                error_code=classify_exception(exc).value,
                failure_class=exc.__class__.__name__,
            )
            return False
        finally:
            close_fn = getattr(client, "close", None)
            if callable(close_fn):
                with suppress(Exception):
                    close_fn()
        log_event(self._logger, "auth.validate", ctx, valid=True)
        return True

    def get_token_count(self, text: str, model_id: Optional[str] = None) -> int:
        """Native token count for ``text``; the shared estimator on any failure."""
        return count_tokens(text, model_id or self.default_model(), self._token_counter)

    def count_conversation_tokens(self, messages: Sequence[Message], model_id: Optional[str] = None) -> int:
        """Sum per-message token counts plus a fixed per-message overhead."""
        return sum(self.get_token_count(m.text_or_joined(), model_id) + MESSAGE_TOKEN_OVERHEAD for m in messages)


__all__ = ["ProviderAdapter"]
