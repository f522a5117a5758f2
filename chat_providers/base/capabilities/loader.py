"""Load and validate provider profiles.

Built-in profiles are JSON resources under ``chat_providers.profiles`` read
through ``importlib.resources``. A user file (JSON or YAML) can replace a
built-in profile; it is validated the same way.

Failure modes
-------------
- ``ProfileNotFoundError`` when no built-in profile exists for the name.
- ``ProfileSchemaError`` when a file carries an unsupported
  ``schema_version`` or fails validation.
"""
from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from ..logging import get_logger, log_event
from .profile import SUPPORTED_SCHEMA_VERSION, ProviderProfile

_PROFILES_PACKAGE = "chat_providers.profiles"
_logger = get_logger("profiles")


class ProfileNotFoundError(LookupError):
    """No profile is available for the requested provider."""


class ProfileSchemaError(ValueError):
    """A profile file is malformed or has an unsupported schema version."""


def _validate(data: Any, source: str) -> ProviderProfile:
    if not isinstance(data, dict):
        raise ProfileSchemaError(f"{source}: profile must be a mapping")
    version = data.get("schema_version", SUPPORTED_SCHEMA_VERSION)
    if version != SUPPORTED_SCHEMA_VERSION:
        raise ProfileSchemaError(
            f"{source}: unsupported schema_version {version!r} (expected {SUPPORTED_SCHEMA_VERSION})"
        )
    try:
        return ProviderProfile.model_validate(data)
    except ValidationError as exc:
        raise ProfileSchemaError(f"{source}: {exc}") from exc


def available_profiles() -> List[str]:
    """Return the names of the built-in profiles, sorted."""
    root = resources.files(_PROFILES_PACKAGE)
    return sorted(p.name[: -len(".json")] for p in root.iterdir() if p.name.endswith(".json"))


@lru_cache(maxsize=None)
def load_builtin_profile(provider: str) -> ProviderProfile:
    """Return the bundled profile for ``provider`` (cached)."""
    name = (provider or "").lower().strip()
    resource = resources.files(_PROFILES_PACKAGE).joinpath(f"{name}.json")
    if not name or not resource.is_file():
        raise ProfileNotFoundError(f"no built-in profile for provider {provider!r}")
    return _validate(json.loads(resource.read_text(encoding="utf-8")), f"{name}.json")


def load_profile_file(path: Union[str, Path]) -> ProviderProfile:
    """Load a profile from a JSON or YAML file on disk."""
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in {".yaml", ".yml"}:
        data: Dict[str, Any] = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    profile = _validate(data, str(p))
    log_event(_logger, "profile.loaded", provider=profile.provider, source=str(p))
    return profile


def load_profile(provider: str, profile_file: Optional[Union[str, Path]] = None) -> ProviderProfile:
    """Return the profile for ``provider``; ``profile_file`` replaces the built-in one."""
    if profile_file:
        return load_profile_file(profile_file)
    return load_builtin_profile(provider)


__all__ = [
    "ProfileNotFoundError",
    "ProfileSchemaError",
    "available_profiles",
    "load_builtin_profile",
    "load_profile_file",
    "load_profile",
]
