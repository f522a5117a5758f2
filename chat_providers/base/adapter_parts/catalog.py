"""
Model catalogue retrieval and shaping.

``fetch_remote_models`` performs a bearer-authenticated ``GET <base>/models``
and returns the raw entries (body ``{"data": [...]}`` or a bare list).
``build_catalog`` then applies the profile: entries hitting the exclusion set
are dropped, limits and pricing are resolved, and the result is ordered by the
priority list (exact id match, by index) followed by every other id
alphabetically.

Limit resolution per model: profile override table, then the value reported
by the remote API, then ``DEFAULT_TOKEN_LIMIT``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import httpx

from ...config.defaults import DEFAULT_TOKEN_LIMIT
from ..capabilities import ProviderProfile
from ..models import ModelCatalogEntry, Pricing

_CONTEXT_KEYS = ("context_length", "context_window", "max_context", "input_token_limit")
_MAX_OUTPUT_KEYS = ("max_output_tokens", "max_completion_tokens", "output_token_limit")


def fetch_remote_models(
    client: httpx.Client,
    base_url: str,
    api_key: Optional[str],
    extra_headers: Optional[Mapping[str, str]] = None,
) -> List[Dict[str, Any]]:
    """Return the raw model entries from ``<base_url>/models``.

    Raises ``httpx.HTTPError`` on transport or HTTP failure and ``ValueError``
    when the body is not JSON.
    """
    headers = dict(extra_headers or {})
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    resp = client.get(f"{base_url.rstrip('/')}/models", headers=headers)
    resp.raise_for_status()
    body = resp.json()
    items = body.get("data", []) if isinstance(body, Mapping) else body
    if not isinstance(items, list):
        return []
    return [it for it in items if isinstance(it, Mapping) and it.get("id")]


def _first_attr(raw: Mapping[str, Any], keys: Iterable[str]) -> Optional[int]:
    """Return the first positive integer value found under ``keys``."""
    for key in keys:
        val = raw.get(key)
        try:
            num = int(val) if val is not None else None
        except (TypeError, ValueError):
            num = None
        if num is not None and num > 0:
            return num
    return None


def _remote_max_output(raw: Mapping[str, Any]) -> Optional[int]:
    direct = _first_attr(raw, _MAX_OUTPUT_KEYS)
    if direct is not None:
        return direct
    top = raw.get("top_provider")
    return _first_attr(top, _MAX_OUTPUT_KEYS) if isinstance(top, Mapping) else None


def resolve_limits(profile: ProviderProfile, model_id: str, raw: Optional[Mapping[str, Any]] = None) -> Tuple[int, int]:
    """Return ``(context_length, max_output_tokens)`` for ``model_id``."""
    raw = raw or {}
    context = profile.context_length_overrides.get(model_id) or _first_attr(raw, _CONTEXT_KEYS) or DEFAULT_TOKEN_LIMIT
    max_output = profile.max_output_overrides.get(model_id) or _remote_max_output(raw) or DEFAULT_TOKEN_LIMIT
    return int(context), int(max_output)


def _resolve_pricing(profile: ProviderProfile, model_id: str, raw: Mapping[str, Any]) -> Pricing:
    remote = raw.get("pricing")
    if model_id not in profile.pricing and isinstance(remote, Mapping):
        try:
            return Pricing(prompt=float(remote["prompt"]), completion=float(remote["completion"]))
        except (KeyError, TypeError, ValueError):
            pass
    table = profile.pricing_for(model_id)
    return Pricing(prompt=table.prompt, completion=table.completion)


def to_catalog_entry(profile: ProviderProfile, raw: Mapping[str, Any]) -> ModelCatalogEntry:
    model_id = str(raw["id"])
    context, max_output = resolve_limits(profile, model_id, raw)
    return ModelCatalogEntry(
        id=model_id,
        name=str(raw.get("name") or raw.get("display_name") or model_id),
        provider=profile.provider,
        context_length=context,
        max_output_tokens=max_output,
        pricing=_resolve_pricing(profile, model_id, raw),
    )


def sort_key(profile: ProviderProfile, model_id: str) -> Tuple[int, int, str]:
    """Priority entries first (by list index), then the rest alphabetically."""
    idx = profile.priority_index(model_id)
    return (0, idx, "") if idx is not None else (1, 0, model_id)


def build_catalog(profile: ProviderProfile, raw_items: Iterable[Mapping[str, Any]]) -> List[ModelCatalogEntry]:
    """Filter, normalize and order raw entries into catalogue entries."""
    entries = [to_catalog_entry(profile, raw) for raw in raw_items if not profile.is_excluded(str(raw["id"]))]
    return sorted(entries, key=lambda e: sort_key(profile, e.id))


__all__ = [
    "fetch_remote_models",
    "resolve_limits",
    "to_catalog_entry",
    "sort_key",
    "build_catalog",
]
