"""Streaming package: request state machine and the single-reader token channel."""

from .channel import TokenSink, TokenStream, extract_delta_text, forward_tokens, register_stream_cleanup
from .state import TERMINAL_STATES, StreamOutcome, StreamState

__all__ = [
    "StreamState",
    "StreamOutcome",
    "TERMINAL_STATES",
    "TokenSink",
    "TokenStream",
    "forward_tokens",
    "extract_delta_text",
    "register_stream_cleanup",
]
