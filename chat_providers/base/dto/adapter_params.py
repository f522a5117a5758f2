"""Read-only adapter configuration.

``AdapterParams`` is what ``ProviderFactory`` hands to ``ProviderAdapter``
after merging defaults, files, environment and explicit overrides. Adapters
never modify it.
"""
from __future__ import annotations

from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AdapterParams(BaseModel):
    """Adapter settings.

    Attributes
    ----------
    provider:
        Provider tag the settings belong to.
    model:
        Model used when a call names none; the profile default applies when
        this is unset too.
    api_key:
        Bearer credential for chat and catalogue requests.
    base_url:
        API root (e.g. ``https://openrouter.ai/api/v1``); trailing slashes are
        removed.
    temperature:
        Sampling temperature in ``[0, 2]``. ``None`` sends none.
    timeout_seconds:
        SDK and catalogue request timeout; ``None`` keeps library defaults.
    profile_file:
        JSON/YAML profile replacing the bundled one.
    headers:
        Extra headers for catalogue requests (e.g. OpenRouter attribution).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: Optional[str] = None
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    profile_file: Optional[str] = None
    headers: Mapping[str, str] = Field(default_factory=dict)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.rstrip("/") or None


__all__ = ["AdapterParams"]
