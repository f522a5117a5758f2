"""
Helper utilities shaping Chat Completions requests and reading responses.

Purpose:
- Build the wire message list from a system prompt and a normalized history,
  applying the profile's system-to-user conversion.
- Assemble ``chat.completions.create`` parameters, honouring the profile's
  temperature and ``max_completion_tokens`` rules.
- Invoke the SDK and wrap failures into the request error family.
- Provide the default ``openai.OpenAI`` client factory.

No timeouts are set here; the SDK's own timeout/retry behaviour applies.
"""

from __future__ import annotations

import typing as _t

import openai

from ..capabilities import ProviderProfile
from ..errors import ErrorCode, ProviderError, ProviderRequestError, wrap_exception
from ..models import Message, PLAIN_ROLES


def default_client_factory(
    *,
    api_key: _t.Optional[str],
    base_url: _t.Optional[str],
    timeout: _t.Optional[float] = None,
    max_retries: _t.Optional[int] = None,
) -> openai.OpenAI:
    """Construct an ``openai.OpenAI`` client; unset options keep SDK defaults."""
    kwargs: _t.Dict[str, _t.Any] = {"api_key": api_key, "base_url": base_url}
    if timeout is not None:
        kwargs["timeout"] = timeout
    if max_retries is not None:
        kwargs["max_retries"] = max_retries
    return openai.OpenAI(**kwargs)


def build_wire_messages(
    profile: ProviderProfile,
    model: str,
    system_prompt: _t.Optional[str],
    messages: _t.Sequence[Message],
) -> _t.List[dict]:
    """Prepend the system prompt and render ``messages`` for the SDK.

    The system prompt is sent as ``user`` when the profile says the model
    rejects the ``system`` role; it is omitted when empty. Every message must
    already carry a plain role.
    """
    wire: _t.List[dict] = []
    if system_prompt:
        role = "user" if profile.should_convert_system_to_user(model) else "system"
        wire.append({"role": role, "content": system_prompt})
    for msg in messages:
        if msg.role not in PLAIN_ROLES:
            raise ValueError(f"message role {msg.role!r} must be normalized before sending")
        wire.append(msg.to_openai())
    return wire


def build_chat_params(
    profile: ProviderProfile,
    model: str,
    messages: _t.List[dict],
    max_output_tokens: _t.Optional[int],
    temperature: _t.Optional[float],
    *,
    stream: bool = False,
) -> dict:
    """Assemble parameters for ``client.chat.completions.create(**params)``."""
    params: dict = {"model": model, "messages": messages}
    if max_output_tokens is not None:
        key = "max_completion_tokens" if profile.uses_completion_tokens_param(model) else "max_tokens"
        params[key] = int(max_output_tokens)
    if temperature is not None and not profile.should_disable_temperature(model):
        params["temperature"] = float(temperature)
    if stream:
        params["stream"] = True
    return params


def invoke_create(client: _t.Any, params: dict, model: str, provider_name: str) -> _t.Any:
    """Invoke ``chat.completions.create``; failures become ``ProviderRequestError``.

    Network and HTTP failures are raised as ``TransportError``.
    """
    try:
        return client.chat.completions.create(**params)
    except ProviderError:
        raise
    except Exception as e:  # noqa: BLE001
        raise wrap_exception(e, provider=provider_name, model=model) from e


def build_failure(exc: Exception, *, provider: str, model: _t.Optional[str]) -> ProviderRequestError:
    """Return a request error for a failure while building the request."""
    return ProviderRequestError(
        code=ErrorCode.VALIDATION,
        message=f"request construction failed: {exc}",
        provider=provider,
        model=model,
        raw=exc,
    )


def extract_openai_text(resp: _t.Any) -> str:
    """Extract assistant text from a non-streaming response; ``""`` when absent."""
    try:
        content = resp.choices[0].message.content  # type: ignore[attr-defined,index]
    except (AttributeError, IndexError, KeyError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


__all__ = [
    "default_client_factory",
    "build_wire_messages",
    "build_chat_params",
    "invoke_create",
    "build_failure",
    "extract_openai_text",
]
