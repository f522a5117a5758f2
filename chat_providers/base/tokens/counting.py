"""Token counting with a shared character-based fallback.

The native counter uses ``tiktoken``: the model id's own encoding when tiktoken
knows it, else the profile's encoding name. Any failure of the native path
(unknown encoding, missing BPE files, offline environment) degrades to
``estimate_tokens``, which every provider shares so they all degrade the same
way. The fallback is silent apart from a debug log line.
"""
from __future__ import annotations

import logging
import math
from functools import lru_cache
from typing import Callable, Optional

import tiktoken

from ...config.defaults import CHARS_PER_TOKEN
from ..logging import get_logger, log_event

_logger = get_logger("tokens")

NativeCounter = Callable[[str, Optional[str]], int]


def estimate_tokens(text: str, chars_per_token: int = CHARS_PER_TOKEN) -> int:
    """Estimate tokens as ``ceil(len(text) / chars_per_token)``."""
    if not text:
        return 0
    return math.ceil(len(text) / chars_per_token)


@lru_cache(maxsize=32)
def _encoding_for(model_id: Optional[str], encoding_name: str) -> "tiktoken.Encoding":
    if model_id:
        try:
            return tiktoken.encoding_for_model(model_id)
        except KeyError:
            pass
    return tiktoken.get_encoding(encoding_name)


class TiktokenCounter:
    """Native token counter backed by tiktoken encodings."""

    def __init__(self, encoding_name: str = "cl100k_base") -> None:
        self.encoding_name = encoding_name

    def __call__(self, text: str, model_id: Optional[str] = None) -> int:
        return len(_encoding_for(model_id, self.encoding_name).encode(text))


def count_tokens(text: str, model_id: Optional[str] = None, counter: Optional[NativeCounter] = None) -> int:
    """Count tokens with ``counter``; fall back to ``estimate_tokens`` on any failure."""
    native = counter or TiktokenCounter()
    try:
        return int(native(text, model_id))
    except Exception as exc:  # noqa: BLE001 - any native failure selects the estimator
        log_event(
            _logger,
            "tokens.fallback",
            level=logging.DEBUG,
            model=model_id,
            failure_class=exc.__class__.__name__,
        )
        return estimate_tokens(text)


__all__ = ["NativeCounter", "TiktokenCounter", "count_tokens", "estimate_tokens"]
