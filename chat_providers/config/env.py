"""API key lookup in the process environment.

Each bundled provider reads its key from ``<PROVIDER>_API_KEY``. Values
copied verbatim from sample ``.env`` files (``changeme``,
``your-placeholder-key``, ``test_...``) count as unset, so a fresh checkout
never sends a dummy key to a real endpoint.
"""

from __future__ import annotations

import os
import re
from typing import Dict, NamedTuple, Optional

KNOWN_PROVIDERS = ("openai", "openrouter", "deepseek", "anthropic")

ENV_MAP: Dict[str, str] = {name: f"{name.upper()}_API_KEY" for name in KNOWN_PROVIDERS}

_PLACEHOLDER = re.compile(r"placeholder|changeme|example|^test_", re.IGNORECASE)


class ResolvedKey(NamedTuple):
    value: Optional[str]
    env_var: Optional[str]


def is_placeholder(val: Optional[str]) -> bool:
    if val is None:
        return False
    return _PLACEHOLDER.search(str(val).strip()) is not None


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the API key variable for ``provider`` or ``None`` when unknown."""
    if not provider:
        return None
    return ENV_MAP.get(provider.strip().lower())


def resolve_provider_key(provider: str) -> ResolvedKey:
    """Return the usable key for ``provider`` and the variable it came from.

    Both fields are ``None`` when the variable is unset, empty or a placeholder.
    """
    name = get_env_var_name(provider)
    value = os.environ.get(name) if name else None
    if not value or is_placeholder(value):
        return ResolvedKey(None, None)
    return ResolvedKey(value, name)


__all__ = [
    "KNOWN_PROVIDERS",
    "ENV_MAP",
    "ResolvedKey",
    "is_placeholder",
    "get_env_var_name",
    "resolve_provider_key",
]
