"""Per-request logging context.

Every event of one request carries the same ``provider``, ``model`` and
``request_id`` so a request can be followed through ``stream.build`` to
``stream.end``. ``extra`` holds anything else worth repeating on each line.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class LogContext:
    provider: Optional[str] = None
    model: Optional[str] = None
    request_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_request(cls, provider: str, model: Optional[str], **extra: Any) -> "LogContext":
        """Return a context with a fresh random request id."""
        return cls(provider=provider, model=model, request_id=uuid.uuid4().hex, extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into log fields, leaving out unset values."""
        out: Dict[str, Any] = {}
        for key in ("provider", "model", "request_id"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        out.update((k, v) for k, v in self.extra.items() if v is not None)
        return out


__all__ = ["LogContext"]
