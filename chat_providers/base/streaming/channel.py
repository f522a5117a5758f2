"""Token channel primitives.

A streaming request is exposed to exactly one reader as a ``TokenStream``: an
iterator of text fragments in arrival order that also carries the request's
``StreamOutcome``. Callback-style APIs are built on top with
``forward_tokens``.
"""
from __future__ import annotations

from contextlib import ExitStack, suppress
from typing import Any, Callable, Iterator, Optional

from .state import StreamOutcome, StreamState

TokenSink = Callable[[str], None]


class TokenStream:
    """Single-reader iterator over the fragments of one request.

    Responsibilities:
      * Yield ``str`` fragments in arrival order.
      * Expose the ``StreamOutcome`` for post-hoc inspection.
      * Refuse a second reader.
    """

    def __init__(self, tokens: Iterator[str], outcome: StreamOutcome) -> None:
        self._tokens = tokens
        self._outcome = outcome
        self._claimed = False

    def __iter__(self) -> Iterator[str]:
        if self._claimed:
            raise RuntimeError("token stream already has a reader")
        self._claimed = True
        return self._tokens

    @property
    def outcome(self) -> StreamOutcome:
        return self._outcome

    @property
    def state(self) -> StreamState:
        return self._outcome.state

    def fail(self, exc: BaseException) -> None:
        """End the request as failed with ``exc``, running the generator's cleanup.

        The generator records the failure on ``outcome`` and re-raises it,
        possibly wrapped; that re-raise is dropped here because the caller
        still holds ``exc``.
        """
        throw_fn = getattr(self._tokens, "throw", None)
        if not callable(throw_fn):
            self.close()
            return
        with suppress(Exception):
            throw_fn(exc)

    def close(self) -> None:
        """Stop the underlying generator (runs its cleanup)."""
        close_fn = getattr(self._tokens, "close", None)
        if callable(close_fn):
            close_fn()


def forward_tokens(tokens: TokenStream, on_token: TokenSink) -> StreamOutcome:
    """Deliver every fragment of ``tokens`` to ``on_token`` synchronously.

    An exception raised by ``on_token`` fails the request and is re-raised
    unchanged. The stream is closed on every exit path.
    """
    try:
        for token in tokens:
            try:
                on_token(token)
            except Exception as exc:
                tokens.fail(exc)
                raise
    finally:
        tokens.close()
    return tokens.outcome


def extract_delta_text(chunk: Any) -> Optional[str]:
    """Return the text fragment of a Chat Completions stream chunk, if any."""
    try:
        choices = getattr(chunk, "choices", None) or []
        if not choices:
            return None
        delta = getattr(choices[0], "delta", None)
        content = getattr(delta, "content", None) if delta is not None else None
        return content if isinstance(content, str) and content else None
    except (AttributeError, IndexError, TypeError):
        return None


def register_stream_cleanup(stream: Any, stack: ExitStack) -> None:
    """Register a best-effort ``close()`` of the native stream on ``stack``."""
    close_fn = getattr(stream, "close", None)
    if callable(close_fn):
        def _safe_close():  # noqa: D401 - simple internal callback
            with suppress(Exception):
                close_fn()
        stack.callback(_safe_close)


__all__ = [
    "TokenSink",
    "TokenStream",
    "forward_tokens",
    "extract_delta_text",
    "register_stream_cleanup",
]
