"""Structural types for the SDK client the engine drives.

The engine only ever calls ``client.chat.completions.create(**body)``; any
object with that shape works, which is how tests inject fakes. The default
``ClientFactory`` builds ``openai.OpenAI``.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol


class _Completions(Protocol):
    def create(self, **body: Any) -> Any:
        """Non-streaming: an object with ``choices[0].message.content``.

        With ``stream=True``: an iterable of chunks with ``choices[0].delta.content``.
        """
        ...


class _Chat(Protocol):
    completions: _Completions


class ChatCompletionsClient(Protocol):
    chat: _Chat


class ClientFactory(Protocol):
    def __call__(
        self,
        *,
        api_key: Optional[str],
        base_url: Optional[str],
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ) -> ChatCompletionsClient:
        ...


__all__ = ["ChatCompletionsClient", "ClientFactory"]
