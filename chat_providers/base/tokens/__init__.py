"""Token counting helpers (native tiktoken counter and the shared estimator)."""

from .counting import NativeCounter, TiktokenCounter, count_tokens, estimate_tokens

__all__ = ["NativeCounter", "TiktokenCounter", "count_tokens", "estimate_tokens"]
