"""Provider configuration resolution.

``get_provider_config(provider, overrides=None)`` returns a plain dict with
the keys ``model``, ``base_url``, ``temperature``, ``api_key``,
``profile_file`` (and ``timeout_seconds`` when supplied). Later sources win:

1. ``DEFAULTS`` built from ``config.defaults``.
2. The provider's section of the file named by ``CHAT_PROVIDERS_CONFIG_FILE``
   (JSON, or YAML when it is not JSON)::

       openai:
         model: gpt-4o-mini
         temperature: 0.2
       deepseek:
         base_url: https://api.deepseek.com/v1

3. ``<PROVIDER>_MODEL``, ``<PROVIDER>_API_KEY``, ``<PROVIDER>_BASE_URL``,
   ``<PROVIDER>_TEMPERATURE`` and ``<PROVIDER>_PROFILE_FILE``. A ``.env`` file
   (path in ``DOTENV_FILE``, default ``./.env``) is read once into the
   environment first; it fills unset or placeholder variables only.
4. ``overrides`` (``None`` values ignored).

The parsed file and the ``.env`` state are cached; ``reset_config_cache``
forgets both.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from . import defaults as _d
from .env import is_placeholder, resolve_provider_key

CONFIG_FILE_ENV = "CHAT_PROVIDERS_CONFIG_FILE"
DOTENV_FILE_ENV = "DOTENV_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    name: {"model": model, "base_url": base_url, "temperature": _d.DEFAULT_TEMPERATURE}
    for name, model, base_url in (
        ("openai", _d.OPENAI_DEFAULT_MODEL, _d.OPENAI_DEFAULT_BASE_URL),
        ("openrouter", _d.OPENROUTER_DEFAULT_MODEL, _d.OPENROUTER_DEFAULT_BASE_URL),
        ("deepseek", _d.DEEPSEEK_DEFAULT_MODEL, _d.DEEPSEEK_DEFAULT_BASE_URL),
        ("anthropic", _d.ANTHROPIC_DEFAULT_MODEL, _d.ANTHROPIC_DEFAULT_BASE_URL),
    )
}

# config key -> environment variable suffix
ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - variable suffix
    "base_url": "BASE_URL",
    "temperature": "TEMPERATURE",
    "profile_file": "PROFILE_FILE",
}

_state: Dict[str, Any] = {"file": None, "dotenv_done": False}


def _read_dotenv(path: Path) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if key:
            pairs[key] = value.strip().strip("'\"")
    return pairs


def _apply_dotenv_once() -> None:
    if _state["dotenv_done"]:
        return
    _state["dotenv_done"] = True
    path = Path(os.getenv(DOTENV_FILE_ENV, ".env"))
    if not path.is_file():
        return
    for key, value in _read_dotenv(path).items():
        current = os.environ.get(key)
        if current is None or is_placeholder(current):
            os.environ[key] = value


def _parse_config_text(text: str) -> Dict[str, Any]:
    """Parse JSON, falling back to YAML; anything but a mapping yields ``{}``."""
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError:
            data = None
    return data if isinstance(data, dict) else {}


def _file_config() -> Dict[str, Any]:
    if _state["file"] is None:
        path = os.getenv(CONFIG_FILE_ENV)
        if path and Path(path).is_file():
            _state["file"] = _parse_config_text(Path(path).read_text(encoding="utf-8"))
        else:
            _state["file"] = {}
    return _state["file"]


def _env_config(provider: str) -> Dict[str, Any]:
    prefix = provider.upper()
    found: Dict[str, Any] = {}
    for key, suffix in ENV_FIELD_MAP.items():
        value = os.getenv(f"{prefix}_{suffix}")
        if value is None or (key == "api_key" and is_placeholder(value)):
            continue
        found[key] = value
    return found


def _as_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged configuration for ``provider``.

    ``temperature`` is returned as a ``float``; an unparsable value is dropped.
    """
    _apply_dotenv_once()
    name = (provider or "").strip().lower()

    cfg: Dict[str, Any] = dict(DEFAULTS.get(name, {}))
    section = _file_config().get(name)
    if isinstance(section, dict):
        cfg.update(section)
    cfg.update(_env_config(name))
    if not cfg.get("api_key"):
        key = resolve_provider_key(name).value
        if key:
            cfg["api_key"] = key
    if overrides:
        cfg.update((k, v) for k, v in overrides.items() if v is not None)

    if "temperature" in cfg:
        temperature = _as_float(cfg.pop("temperature"))
        if temperature is not None:
            cfg["temperature"] = temperature
    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


def reset_config_cache() -> None:
    _state["file"] = None
    _state["dotenv_done"] = False


__all__ = [
    "CONFIG_FILE_ENV",
    "DOTENV_FILE_ENV",
    "DEFAULTS",
    "ENV_FIELD_MAP",
    "get_provider_config",
    "get_model",
    "reset_config_cache",
]
