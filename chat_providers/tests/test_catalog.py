"""Catalogue filtering, ordering and limit resolution tests.

HTTP is served by ``httpx.MockTransport`` so no network access is needed.
"""

from __future__ import annotations

import json
import logging

import httpx

from chat_providers.base.adapter import ProviderAdapter
from chat_providers.base.adapter_parts import build_catalog, fetch_remote_models, resolve_limits
from chat_providers.base.capabilities import load_builtin_profile
from chat_providers.base.dto import AdapterParams
from chat_providers.tests.fakes import FakeClient, make_profile


def _mock_http(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _openai_adapter(http_client: httpx.Client) -> ProviderAdapter:
    params = AdapterParams(provider="openai", api_key="sk-test-key", base_url="https://llm.test/v1")
    return ProviderAdapter(load_builtin_profile("openai"), params, client=FakeClient(), http_client=http_client)


def test_exclusion_and_priority_ordering():
    raw = [{"id": mid} for mid in ("gpt-4o", "whisper-1", "gpt-4", "aaa-custom")]
    entries = build_catalog(load_builtin_profile("openai"), raw)
    assert [e.id for e in entries] == ["gpt-4o", "gpt-4", "aaa-custom"]  # nosec B101


def test_unlisted_models_sorted_alphabetically_after_priority():
    profile = make_profile(priority_order=["m-2"])
    entries = build_catalog(profile, [{"id": "zeta"}, {"id": "alpha"}, {"id": "m-2"}])
    assert [e.id for e in entries] == ["m-2", "alpha", "zeta"]  # nosec B101


def test_resolve_limits_override_then_remote_then_default():
    profile = make_profile(context_length_overrides={"a": 1000}, max_output_overrides={"a": 100})
    assert resolve_limits(profile, "a", {"context_length": 5}) == (1000, 100)  # nosec B101
    assert resolve_limits(profile, "b", {"context_length": 32000, "top_provider": {"max_completion_tokens": 2048}}) == (  # nosec B101
        32000,
        2048,
    )
    assert resolve_limits(profile, "c") == (4096, 4096)  # nosec B101
    assert resolve_limits(profile, "d", {"context_length": "bogus"}) == (4096, 4096)  # nosec B101


def test_catalog_entry_pricing_and_name():
    profile = make_profile(default_pricing={"prompt": 0.1, "completion": 0.2}, pricing={"p": {"prompt": 1, "completion": 2}})
    entries = build_catalog(
        profile,
        [
            {"id": "p", "pricing": {"prompt": "9", "completion": "9"}},
            {"id": "r", "name": "Remote", "pricing": {"prompt": "0.5", "completion": "0.75"}},
            {"id": "s"},
        ],
    )
    by_id = {e.id: e for e in entries}
    assert (by_id["p"].pricing.prompt, by_id["p"].pricing.completion) == (1.0, 2.0)  # nosec B101
    assert (by_id["r"].pricing.prompt, by_id["r"].pricing.completion) == (0.5, 0.75)  # nosec B101
    assert (by_id["s"].pricing.prompt, by_id["s"].pricing.completion) == (0.1, 0.2)  # nosec B101
    assert by_id["r"].name == "Remote" and by_id["s"].name == "s"  # nosec B101
    assert by_id["s"].provider == "fake"  # nosec B101


def test_fetch_remote_models_sends_bearer_and_accepts_bare_list():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["url"] = str(request.url)
        return httpx.Response(200, json=[{"id": "m1"}, {"no_id": True}, "junk"])

    with _mock_http(handler) as client:
        items = fetch_remote_models(client, "https://llm.test/v1/", "sk-abc")
    assert items == [{"id": "m1"}]  # nosec B101
    assert seen == {"auth": "Bearer sk-abc", "url": "https://llm.test/v1/models"}  # nosec B101


def test_list_models_end_to_end():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": [{"id": "whisper-1"}, {"id": "gpt-4"}, {"id": "gpt-4o"}]})

    with _mock_http(handler) as client:
        models = _openai_adapter(client).list_models()
    assert [m.id for m in models] == ["gpt-4o", "gpt-4"]  # nosec B101
    assert models[0].context_length == 128000 and models[0].max_output_tokens == 16384  # nosec B101
    assert models[1].context_length == 8192  # nosec B101


def test_list_models_returns_empty_on_http_failure(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "boom"})

    caplog.set_level(logging.WARNING, logger="chat_providers")
    with _mock_http(handler) as client:
        assert _openai_adapter(client).list_models() == []  # nosec B101
    events = [json.loads(r.getMessage()) for r in caplog.records if r.getMessage().startswith("{")]
    errors = [e for e in events if e.get("event") == "models.list.error"]
    assert errors and errors[-1]["error_code"] == "server_error"  # nosec B101


def test_list_models_returns_empty_on_connection_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with _mock_http(handler) as client:
        assert _openai_adapter(client).list_models() == []  # nosec B101


def test_list_models_returns_empty_on_non_json_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    with _mock_http(handler) as client:
        assert _openai_adapter(client).list_models() == []  # nosec B101
