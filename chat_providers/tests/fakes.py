"""Fake OpenAI-style SDK objects and adapter builders shared by the tests.

The fakes reproduce only the attribute shapes the engine reads:
``choices[0].message.content`` for one-shot responses and
``choices[0].delta.content`` for stream chunks.
"""
from __future__ import annotations

import types
from typing import Any, Dict, Iterator, List, Optional, Sequence

from chat_providers.base.adapter import ProviderAdapter
from chat_providers.base.capabilities import ProviderProfile
from chat_providers.base.dto import AdapterParams


class FakeChunk:
    class _Delta:
        def __init__(self, content: Optional[str]) -> None:
            self.content = content

    class _Choice:
        def __init__(self, text: Optional[str]) -> None:
            self.delta = FakeChunk._Delta(text)

    def __init__(self, text: Optional[str]) -> None:
        self.choices = [self._Choice(text)]


class FakeResponse:
    class _Message:
        def __init__(self, content: str) -> None:
            self.content = content

    class _Choice:
        def __init__(self, content: str) -> None:
            self.message = FakeResponse._Message(content)

    def __init__(self, content: str) -> None:
        self.choices = [self._Choice(content)]
        self.usage = types.SimpleNamespace(prompt_tokens=3, completion_tokens=2, total_tokens=5)


class FakeStream:
    """Iterable of chunks that records ``close()`` and can fail mid-way."""

    def __init__(self, texts: Sequence[Optional[str]], fail_after: Optional[int] = None) -> None:
        self._texts = list(texts)
        self._fail_after = fail_after
        self.closed = False
        self.consumed = 0

    def __iter__(self) -> Iterator[FakeChunk]:
        for idx, text in enumerate(self._texts):
            if self._fail_after is not None and idx == self._fail_after:
                raise ConnectionError("stream dropped")
            self.consumed += 1
            yield FakeChunk(text)

    def close(self) -> None:
        self.closed = True


class FakeClient:
    """Chat completions client returning canned responses.

    ``calls`` records the keyword arguments of every ``create`` call.
    """

    def __init__(
        self,
        content: str = "",
        chunks: Sequence[Optional[str]] = (),
        *,
        error: Optional[Exception] = None,
        fail_after: Optional[int] = None,
    ) -> None:
        self._content = content
        self._chunks = list(chunks)
        self._error = error
        self._fail_after = fail_after
        self.calls: List[Dict[str, Any]] = []
        self.streams: List[FakeStream] = []
        self.closed = False
        self.chat = types.SimpleNamespace(completions=types.SimpleNamespace(create=self._create))

    def _create(self, **params: Any) -> Any:  # noqa: D401 - SDK parity
        self.calls.append(params)
        if self._error is not None:
            raise self._error
        if params.get("stream"):
            stream = FakeStream(self._chunks, self._fail_after)
            self.streams.append(stream)
            return stream
        return FakeResponse(self._content)

    def close(self) -> None:
        self.closed = True


def make_profile(**overrides: Any) -> ProviderProfile:
    data: Dict[str, Any] = {
        "provider": "fake",
        "default_model": "fake-model",
        "probe_model": "fake-probe",
    }
    data.update(overrides)
    return ProviderProfile(**data)


def failing_counter(text: str, model_id: Optional[str] = None) -> int:
    raise RuntimeError("tokenizer unavailable")


def make_adapter(
    client: Any = None,
    *,
    profile: Optional[ProviderProfile] = None,
    temperature: Optional[float] = 0.7,
    **kwargs: Any,
) -> ProviderAdapter:
    """Build an adapter over ``client`` with a test profile and a stub tokenizer."""
    kwargs.setdefault("token_counter", failing_counter)
    return ProviderAdapter(
        profile or make_profile(),
        AdapterParams(provider="fake", api_key="sk-test-key", base_url="https://llm.test/v1", temperature=temperature),
        client=client if client is not None else FakeClient(),
        **kwargs,
    )


__all__ = [
    "FakeChunk",
    "FakeResponse",
    "FakeStream",
    "FakeClient",
    "make_profile",
    "make_adapter",
    "failing_counter",
]
