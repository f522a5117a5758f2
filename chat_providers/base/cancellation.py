"""Abort signal for streaming requests.

The caller creates a ``CancellationToken``, hands it to a streaming call and
keeps the only right to trip it. The adapter engine reads ``cancelled``
before forwarding each fragment; it never cancels a token itself.

``AbortSignal`` is the name the chat layer uses for the same type.
"""
from __future__ import annotations

import threading
from typing import Optional


class CancellationToken:
    """One-shot, thread-safe cancellation flag with an optional reason.

    Tripping is idempotent: the reason given on the first ``cancel`` call is
    kept. A UI thread may cancel while another thread consumes the stream.
    """

    __slots__ = ("_event", "_reason", "_guard")

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: Optional[str] = None
        self._guard = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        with self._guard:
            if self._event.is_set():
                return
            self._reason = reason
            self._event.set()

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"<CancellationToken cancelled={self.cancelled} reason={self._reason!r}>"


AbortSignal = CancellationToken

__all__ = ["AbortSignal", "CancellationToken"]
