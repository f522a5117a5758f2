"""Streaming request state machine.

Each streaming request moves through::

    Idle -> Building -> Sending -> StreamingTokens* -> Completed
                                 \\-> Aborted
                                 \\-> Failed

``Completed`` and ``Failed`` are terminal. ``Aborted`` is terminal for token
delivery: the remote call may still be winding down, but nothing more reaches
the sink. ``StreamOutcome`` records the path of one request together with its
delivery metrics and is what callers inspect after iteration.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional

from ..errors import ProviderError


class StreamState(str, Enum):
    IDLE = "idle"
    BUILDING = "building"
    SENDING = "sending"
    STREAMING = "streaming_tokens"
    COMPLETED = "completed"
    ABORTED = "aborted"
    FAILED = "failed"


TERMINAL_STATES: FrozenSet[StreamState] = frozenset(
    {StreamState.COMPLETED, StreamState.ABORTED, StreamState.FAILED}
)

_ALLOWED: Dict[StreamState, FrozenSet[StreamState]] = {
    StreamState.IDLE: frozenset({StreamState.BUILDING}),
    StreamState.BUILDING: frozenset({StreamState.SENDING, StreamState.ABORTED, StreamState.FAILED}),
    StreamState.SENDING: frozenset(
        {StreamState.STREAMING, StreamState.COMPLETED, StreamState.ABORTED, StreamState.FAILED}
    ),
    StreamState.STREAMING: frozenset(
        {StreamState.STREAMING, StreamState.COMPLETED, StreamState.ABORTED, StreamState.FAILED}
    ),
}


@dataclass
class StreamOutcome:
    """Mutable record of one streaming request.

    Attributes:
        state: Current state; terminal once iteration has finished.
        emitted: Number of tokens delivered to the reader.
        error: The classified failure when ``state`` is ``FAILED``.
        abort_reason: Reason passed to the abort signal, if any.
        time_to_first_token_ms: Latency until the first delivered token.
        total_duration_ms: Wall time from ``BUILDING`` to the terminal state.
    """

    state: StreamState = StreamState.IDLE
    emitted: int = 0
    error: Optional[ProviderError] = None
    abort_reason: Optional[str] = None
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    _t0: Optional[float] = field(default=None, repr=False)

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def advance(self, new_state: StreamState) -> None:
        """Move to ``new_state``; raises ``RuntimeError`` on an illegal transition."""
        if new_state not in _ALLOWED.get(self.state, frozenset()):
            raise RuntimeError(f"illegal stream transition {self.state.value} -> {new_state.value}")
        now = time.perf_counter()
        if new_state is StreamState.BUILDING:
            self._t0 = now
        if self._t0 is not None and new_state in TERMINAL_STATES:
            self.total_duration_ms = (now - self._t0) * 1000.0
        self.state = new_state

    def record_token(self) -> None:
        """Count one delivered token, entering ``STREAMING`` on the first."""
        if self.emitted == 0 and self._t0 is not None:
            self.time_to_first_token_ms = (time.perf_counter() - self._t0) * 1000.0
        self.emitted += 1
        if self.state is not StreamState.STREAMING:
            self.advance(StreamState.STREAMING)


__all__ = ["StreamState", "StreamOutcome", "TERMINAL_STATES"]
