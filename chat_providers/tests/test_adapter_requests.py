"""Request shaping and one-shot completion tests for ``ProviderAdapter``."""

from __future__ import annotations

import json
import logging

import openai
import pytest

from chat_providers.base.adapter import ProviderAdapter
from chat_providers.base.adapter_parts import build_chat_params, build_wire_messages
from chat_providers.base.capabilities import load_builtin_profile
from chat_providers.base.dto import AdapterParams
from chat_providers.base.errors import ErrorCode, ProviderRequestError, TransportError
from chat_providers.base.interfaces import ProviderAdapterProtocol
from chat_providers.base.models import ContentPart, Message
from chat_providers.tests.fakes import FakeClient, make_adapter, make_profile


def test_adapter_satisfies_protocol():
    assert isinstance(make_adapter(), ProviderAdapterProtocol)  # nosec B101


def test_complete_once_sends_system_then_user():
    client = FakeClient(content="Hello there")
    out = make_adapter(client).complete_once("Be brief.", "Hi", max_output_tokens=64)
    assert out == "Hello there"  # nosec B101
    call = client.calls[0]
    assert call["model"] == "fake-model"  # nosec B101
    assert call["messages"] == [  # nosec B101
        {"role": "system", "content": "Be brief."},
        {"role": "user", "content": "Hi"},
    ]
    assert call["max_tokens"] == 64 and call["temperature"] == pytest.approx(0.7)  # nosec B101
    assert "stream" not in call  # nosec B101


def test_system_prompt_sent_as_user_for_models_rejecting_system_role():
    profile = load_builtin_profile("openai")
    wire = build_wire_messages(profile, "o1-mini", "Rules", [Message(role="user", content="Q")])
    assert wire[0] == {"role": "user", "content": "Rules"}  # nosec B101
    assert build_wire_messages(profile, "gpt-4o", "", [Message(role="user", content="Q")]) == [  # nosec B101
        {"role": "user", "content": "Q"}
    ]


def test_temperature_and_token_param_follow_profile():
    profile = load_builtin_profile("openai")
    o1 = build_chat_params(profile, "o1-mini", [], 100, 0.5)
    assert "temperature" not in o1 and o1["max_completion_tokens"] == 100  # nosec B101
    assert "max_tokens" not in o1  # nosec B101
    gpt = build_chat_params(profile, "gpt-4o", [], None, 0.5, stream=True)
    assert gpt == {"model": "gpt-4o", "messages": [], "temperature": 0.5, "stream": True}  # nosec B101


def test_structured_content_is_rendered_in_wire_shape():
    msg = Message(role="user", content=[ContentPart.of_text("look"), ContentPart.of_image("data:image/png;base64,AA")])
    wire = build_wire_messages(make_profile(), "fake-model", None, [msg])
    assert wire == [  # nosec B101
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "look"},
                {"type": "image_url", "image_url": {"url": "data:image/png;base64,AA"}},
            ],
        }
    ]


def test_unnormalized_role_is_rejected_before_sending():
    client = FakeClient(content="x")
    adapter = make_adapter(client)
    stream = adapter.iter_conversation("", [Message(role="ai-gpt-4o", content="old")])
    with pytest.raises(ProviderRequestError) as ei:
        list(stream)
    assert ei.value.code is ErrorCode.VALIDATION  # nosec B101
    assert client.calls == []  # nosec B101


def test_complete_once_wraps_sdk_failures(caplog):
    caplog.set_level(logging.ERROR, logger="chat_providers")
    client = FakeClient(error=RuntimeError("invalid model parameter"))
    with pytest.raises(ProviderRequestError) as ei:
        make_adapter(client).complete_once("", "Hi")
    assert not isinstance(ei.value, TransportError)  # nosec B101
    assert ei.value.code is ErrorCode.VALIDATION and ei.value.provider == "fake"  # nosec B101
    events = [json.loads(r.getMessage()) for r in caplog.records if r.getMessage().startswith("{")]
    assert any(e.get("event") == "chat.error" and e.get("phase") == "start" for e in events)  # nosec B101


def test_complete_once_raises_transport_error_for_network_failures():
    client = FakeClient(error=ConnectionError("connection reset"))
    with pytest.raises(TransportError) as ei:
        make_adapter(client).complete_once("", "Hi", model_id="other-model")
    assert ei.value.code is ErrorCode.TRANSPORT and ei.value.model == "other-model"  # nosec B101


def test_missing_key_surfaces_as_auth_failure():
    def broken_factory(**kwargs):
        raise openai.OpenAIError("The api_key client option must be set")

    adapter = make_adapter(client=FakeClient(), client_factory=broken_factory)
    # a ready client skips the factory
    assert adapter.complete_once("", "Hi") == ""  # nosec B101

    keyless = ProviderAdapter(make_profile(), AdapterParams(provider="fake"), client_factory=broken_factory)
    with pytest.raises(ProviderRequestError) as ei:
        keyless.complete_once("", "Hi")
    assert ei.value.code is ErrorCode.AUTH  # nosec B101


def test_no_model_available_is_a_validation_error():
    adapter = make_adapter(profile=make_profile(default_model=None))
    with pytest.raises(ProviderRequestError) as ei:
        adapter.complete_once("", "Hi")
    assert ei.value.code is ErrorCode.VALIDATION  # nosec B101


def test_temperature_none_is_not_forwarded():
    client = FakeClient(content="ok")
    make_adapter(client, temperature=None).complete_once("", "Hi")
    assert "temperature" not in client.calls[0]  # nosec B101
