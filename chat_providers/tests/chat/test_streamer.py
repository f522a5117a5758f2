"""ConversationStreamer tests over fake SDK clients."""

from __future__ import annotations

import threading

import pytest

from chat_providers.base.cancellation import CancellationToken
from chat_providers.base.errors import ErrorCode, TransportError, UnsupportedCapabilityError
from chat_providers.base.factory import UnknownProviderError
from chat_providers.base.models import ContentPart, Message, ModelCatalogEntry, Pricing
from chat_providers.base.streaming import StreamState
from chat_providers.chat import ConversationStreamer, MappingAttachmentStore, MessageHistoryNormalizer
from chat_providers.tests.fakes import FakeClient, make_adapter, make_profile


def _streamer(client: FakeClient, **profile_overrides) -> ConversationStreamer:
    adapter = make_adapter(client, profile=make_profile(**profile_overrides))
    return ConversationStreamer({"fake": adapter}, default_provider="fake", system_prompt="Be kind.")


def test_result_text_is_concatenation_of_forwarded_tokens():
    client = FakeClient(chunks=["Hel", "lo", "!"])
    seen = []
    result = _streamer(client).stream([{"role": "user", "content": "hi"}], on_token=seen.append)
    assert result.text == "".join(seen) == "Hello!"  # nosec B101
    assert result.state is StreamState.COMPLETED and not result.aborted  # nosec B101
    assert result.model_id == "fake-model" and result.role_tag == "ai-fake-model"  # nosec B101
    assert client.calls[0]["messages"][0] == {"role": "system", "content": "Be kind."}  # nosec B101


def test_history_is_normalized_before_sending():
    client = FakeClient(chunks=["ok"])
    normalizer = MessageHistoryNormalizer(MappingAttachmentStore({"notes": "N"}))
    streamer = ConversationStreamer(
        {"fake": make_adapter(client)}, default_provider="fake", normalizer=normalizer
    )
    streamer.stream(
        [
            {"role": "user", "content": "CONTEXT FILES:\n### notes.pdf"},
            {"role": "ai-gpt-4o", "content": "earlier"},
            {"role": "user", "content": "next"},
        ]
    )
    sent = client.calls[0]["messages"]
    assert [m["role"] for m in sent] == ["user", "assistant", "user"]  # nosec B101
    assert sent[0]["content"] == "CONTEXT FILES:\n### notes.pdf (Extracted Content)\nN"  # nosec B101


def test_failure_discards_partial_text_and_propagates():
    client = FakeClient(chunks=["par", "tial", "never"], fail_after=2)
    seen = []
    streamer = _streamer(client)
    with pytest.raises(TransportError):
        streamer.stream([Message(role="user", content="hi")], on_token=seen.append)
    assert seen == ["par", "tial"]  # nosec B101
    assert streamer.busy is False  # nosec B101


def test_abort_returns_partial_text_marked_aborted():
    client = FakeClient(chunks=["a", "b", "c"])
    abort = CancellationToken()

    def on_token(tok: str) -> None:
        abort.cancel("stop")

    result = _streamer(client).stream([Message(role="user", content="hi")], on_token=on_token, abort=abort)
    assert result.text == "a" and result.aborted  # nosec B101


def test_image_input_rejected_before_any_request():
    client = FakeClient(chunks=["x"])
    streamer = _streamer(client, no_image_input_substrings=["fake"])
    msg = Message(role="user", content=[ContentPart.of_text("what is this"), ContentPart.of_image("https://i.test/x.png")])
    with pytest.raises(UnsupportedCapabilityError) as ei:
        streamer.stream([msg])
    assert ei.value.code is ErrorCode.UNSUPPORTED  # nosec B101
    assert client.calls == []  # nosec B101


def test_reentrant_request_is_refused():
    gate = threading.Event()
    release = threading.Event()
    client = FakeClient(chunks=["one", "two"])
    streamer = _streamer(client)

    def on_token(tok: str) -> None:
        gate.set()
        release.wait(timeout=5)

    worker = threading.Thread(
        target=lambda: streamer.stream([Message(role="user", content="hi")], on_token=on_token)
    )
    worker.start()
    try:
        assert gate.wait(timeout=5)  # nosec B101
        assert streamer.busy  # nosec B101
        with pytest.raises(RuntimeError, match="one request at a time"):
            streamer.stream([Message(role="user", content="again")])
    finally:
        release.set()
        worker.join(timeout=5)
    assert not streamer.busy and len(client.calls) == 1  # nosec B101


def test_unknown_provider_tag_raises():
    with pytest.raises(UnknownProviderError):
        _streamer(FakeClient()).stream([Message(role="user", content="hi")], provider="nope")


def test_send_trims_input_and_skips_empty():
    client = FakeClient(chunks=["reply"])
    streamer = _streamer(client)
    history = [Message(role="user", content="first"), Message(role="ai-old", content="answer")]

    assert streamer.send("   \n ", history) is None  # nosec B101
    assert client.calls == []  # nosec B101

    result = streamer.send("  second  ", history)
    assert result is not None and result.text == "reply"  # nosec B101
    assert client.calls[0]["messages"][-1] == {"role": "user", "content": "second"}  # nosec B101
    assert len(history) == 2  # nosec B101


def test_send_uses_catalog_entry_for_model_limits_and_role_tag():
    client = FakeClient(chunks=["r"])
    entry = ModelCatalogEntry(
        id="fake-large",
        name="Fake Large",
        provider="fake",
        context_length=8192,
        max_output_tokens=1024,
        pricing=Pricing(prompt=0.0, completion=0.0),
    )
    result = _streamer(client).send("hi", catalog_entry=entry)
    assert result.model_id == "fake-large" and result.role_tag == "ai-Fake Large"  # nosec B101
    assert client.calls[0]["model"] == "fake-large" and client.calls[0]["max_tokens"] == 1024  # nosec B101
