"""Provider profile: per-provider quirks expressed as data.

Purpose
-------
A ``ProviderProfile`` carries everything that distinguishes one
OpenAI-compatible backend from another: the catalogue exclusion set and
priority order, context/output override tables, pricing, the tiktoken
encoding, and the capability substring tables queried by the adapter engine
before every request.

All matching is case-insensitive substring matching against the model id,
except the priority order and the override tables, which match ids exactly.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation of profile files.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

SUPPORTED_SCHEMA_VERSION = 1


class ProfilePricing(BaseModel):
    """Per-token prompt/completion price in USD."""

    prompt: float = 0.0
    completion: float = 0.0


def _matches_any(model_id: str, substrings: Iterable[str]) -> bool:
    mid = (model_id or "").lower()
    return any(s.lower() in mid for s in substrings if s)


class ProviderProfile(BaseModel):
    """Capability-tagged description of a provider.

    Attributes
    ----------
    schema_version:
        Version of the profile file layout; only ``SUPPORTED_SCHEMA_VERSION``
        is accepted by the loader.
    provider:
        Provider tag (``"openai"``, ``"openrouter"``...).
    default_model:
        Model used when a call does not name one.
    probe_model:
        Model used by key validation; falls back to ``default_model``.
    exclusion_substrings:
        Catalogue entries whose id contains any of these are dropped.
    priority_order:
        Exact ids sorted first, in this order.
    context_length_overrides / max_output_overrides:
        Exact-id override tables taking precedence over remote values.
    system_to_user_substrings:
        Models that reject the ``system`` role.
    streaming_disabled_substrings:
        Models answered with a one-shot call and a single synthetic token.
    temperature_disabled_substrings:
        Models that must not receive a sampling temperature.
    no_image_input_substrings:
        Model families known not to accept image content parts.
    completion_tokens_param_substrings:
        Models that take ``max_completion_tokens`` instead of ``max_tokens``.
    default_pricing / pricing:
        Fallback price and an exact-id price table.
    tiktoken_encoding:
        Encoding used when tiktoken has no mapping for the model id.
    """

    schema_version: int = SUPPORTED_SCHEMA_VERSION
    provider: str
    default_model: Optional[str] = None
    probe_model: Optional[str] = None
    exclusion_substrings: List[str] = Field(default_factory=list)
    priority_order: List[str] = Field(default_factory=list)
    context_length_overrides: Dict[str, int] = Field(default_factory=dict)
    max_output_overrides: Dict[str, int] = Field(default_factory=dict)
    system_to_user_substrings: List[str] = Field(default_factory=list)
    streaming_disabled_substrings: List[str] = Field(default_factory=list)
    temperature_disabled_substrings: List[str] = Field(default_factory=list)
    no_image_input_substrings: List[str] = Field(default_factory=list)
    completion_tokens_param_substrings: List[str] = Field(default_factory=list)
    default_pricing: ProfilePricing = Field(default_factory=ProfilePricing)
    pricing: Dict[str, ProfilePricing] = Field(default_factory=dict)
    tiktoken_encoding: str = "cl100k_base"

    # ---- capability predicates ----
    def should_convert_system_to_user(self, model_id: str) -> bool:
        return _matches_any(model_id, self.system_to_user_substrings)

    def should_disable_streaming(self, model_id: str) -> bool:
        return _matches_any(model_id, self.streaming_disabled_substrings)

    def should_disable_temperature(self, model_id: str) -> bool:
        return _matches_any(model_id, self.temperature_disabled_substrings)

    def accepts_image_input(self, model_id: str) -> bool:
        return not _matches_any(model_id, self.no_image_input_substrings)

    def uses_completion_tokens_param(self, model_id: str) -> bool:
        return _matches_any(model_id, self.completion_tokens_param_substrings)

    # ---- catalogue helpers ----
    def is_excluded(self, model_id: str) -> bool:
        """Return True when the id hits the catalogue exclusion set."""
        return _matches_any(model_id, self.exclusion_substrings)

    def priority_index(self, model_id: str) -> Optional[int]:
        """Return the position of ``model_id`` in the priority order, if listed."""
        try:
            return self.priority_order.index(model_id)
        except ValueError:
            return None

    def pricing_for(self, model_id: str) -> ProfilePricing:
        return self.pricing.get(model_id, self.default_pricing)


__all__ = ["ProviderProfile", "ProfilePricing", "SUPPORTED_SCHEMA_VERSION"]
