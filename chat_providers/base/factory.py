"""Adapter construction by provider name.

``create_adapter("openrouter", api_key=...)`` resolves the configuration
(``chat_providers.config``), loads the profile (bundled, or ``profile_file``)
and returns a ``ProviderAdapter``. Any name works when a ``profile_file`` is
configured for it, which is how self-hosted OpenAI-compatible servers are
added without code changes.

The factory opens no connections and never retries.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from ..config import get_provider_config
from .adapter import ProviderAdapter
from .capabilities import ProfileNotFoundError, ProfileSchemaError, ProviderProfile, available_profiles, load_profile
from .dto.adapter_params import AdapterParams

# Collaborators handed to the engine untouched.
ENGINE_OPTIONS = frozenset({"client", "client_factory", "http_client", "token_counter"})
# Settings merged through the configuration layer.
CONFIG_OPTIONS = frozenset({"model", "api_key", "base_url", "temperature", "timeout_seconds", "profile_file"})


class UnknownProviderError(Exception):
    """No adapter can be built for the requested name or arguments."""


class ProviderFactory:
    """Build ``ProviderAdapter`` instances from provider names."""

    @classmethod
    def create(cls, provider: str, *, params: Optional[AdapterParams] = None, **options: Any) -> ProviderAdapter:
        """Return an adapter for ``provider``.

        ``options`` mixes settings (``model``, ``api_key``, ``base_url``,
        ``temperature``, ``timeout_seconds``, ``profile_file``) with engine
        collaborators (``client``, ``client_factory``, ``http_client``,
        ``token_counter``). Settings in ``options`` win over ``params``.

        Raises ``UnknownProviderError`` for an unknown name, an unusable
        profile or an unexpected option.
        """
        name = (provider or "").strip().lower()
        unexpected = sorted(set(options) - ENGINE_OPTIONS - CONFIG_OPTIONS)
        if unexpected:
            raise UnknownProviderError(f"unexpected options for provider '{provider}': {', '.join(unexpected)}")
        engine = {k: v for k, v in options.items() if k in ENGINE_OPTIONS}
        settings = cls._settings(params, {k: v for k, v in options.items() if k in CONFIG_OPTIONS})

        cfg = get_provider_config(name, settings)
        profile = cls._profile(provider, name, cfg.get("profile_file"))
        adapter_params = AdapterParams(
            provider=profile.provider,
            model=cfg.get("model"),
            api_key=cfg.get("api_key"),
            base_url=cfg.get("base_url"),
            temperature=cfg.get("temperature"),
            timeout_seconds=cfg.get("timeout_seconds"),
            profile_file=str(cfg["profile_file"]) if cfg.get("profile_file") else None,
            headers=dict(params.headers) if params is not None else {},
        )
        return ProviderAdapter(profile, adapter_params, **engine)

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Names of the bundled profiles, sorted."""
        return tuple(available_profiles())

    @staticmethod
    def _profile(provider: str, name: str, profile_file: Any) -> ProviderProfile:
        if not profile_file and name not in available_profiles():
            raise UnknownProviderError(f"Unknown provider '{provider}'")
        try:
            return load_profile(name, profile_file)
        except ProfileNotFoundError as exc:
            raise UnknownProviderError(f"Unknown provider '{provider}'") from exc
        except (ProfileSchemaError, OSError, ValueError) as exc:
            raise UnknownProviderError(f"Invalid profile for provider '{provider}': {exc}") from exc

    @staticmethod
    def _settings(params: Optional[AdapterParams], options: Dict[str, Any]) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        if params is not None:
            merged.update((k, v) for k, v in params.model_dump(exclude_none=True).items() if k in CONFIG_OPTIONS)
        merged.update((k, v) for k, v in options.items() if v is not None)
        return merged


def create_adapter(provider: str, params: Optional[AdapterParams] = None, **options: Any) -> ProviderAdapter:
    """Shorthand for ``ProviderFactory.create``."""
    return ProviderFactory.create(provider, params=params, **options)


__all__ = ["UnknownProviderError", "ProviderFactory", "create_adapter"]
