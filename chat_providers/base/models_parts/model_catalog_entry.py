"""
ModelCatalogEntry DTO for provider model catalogues.

Entries are created per catalogue fetch, are immutable, and are not cached by
this package. ``Pricing`` carries the per-token prompt/completion price
reported by the provider or taken from the provider profile.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict


@dataclass(frozen=True)
class Pricing:
    """Per-token prices in USD."""

    prompt: float
    completion: float


@dataclass(frozen=True)
class ModelCatalogEntry:
    """A single queryable model.

    Attributes:
        id: Model id used in requests.
        name: Display name (the id when the provider reports none).
        provider: Provider tag owning this model (e.g. ``"openai"``).
        context_length: Context window in tokens.
        max_output_tokens: Output token ceiling.
        pricing: Prompt/completion pricing.
    """

    id: str
    name: str
    provider: str
    context_length: int
    max_output_tokens: int
    pricing: Pricing = field(default_factory=lambda: Pricing(prompt=0.0, completion=0.0))

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation of the entry."""
        return asdict(self)


__all__ = ["ModelCatalogEntry", "Pricing"]
