"""Shared fixtures: every test runs against a clean configuration."""

from __future__ import annotations

from typing import Iterator

import pytest

from chat_providers.base.http import close_all_clients
from chat_providers.config import CONFIG_FILE_ENV, DOTENV_FILE_ENV, ENV_FIELD_MAP, reset_config_cache
from chat_providers.config.env import KNOWN_PROVIDERS


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Hide the developer's provider variables, config file and ``.env``."""
    for provider in KNOWN_PROVIDERS:
        prefix = provider.upper()
        monkeypatch.delenv(f"{prefix}_API_KEY", raising=False)
        for suffix in ENV_FIELD_MAP.values():
            monkeypatch.delenv(f"{prefix}_{suffix}", raising=False)
    monkeypatch.delenv(CONFIG_FILE_ENV, raising=False)
    monkeypatch.setenv(DOTENV_FILE_ENV, str(tmp_path / "absent.env"))
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture(scope="session", autouse=True)
def _pooled_clients() -> Iterator[None]:
    yield
    close_all_clients()
