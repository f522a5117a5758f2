"""Adapter engine parts: client protocol, request shaping and catalogue helpers."""

from .catalog import build_catalog, fetch_remote_models, resolve_limits, sort_key, to_catalog_entry
from .client_protocol import ChatCompletionsClient, ClientFactory
from .request_helpers import (
    build_chat_params,
    build_failure,
    build_wire_messages,
    default_client_factory,
    extract_openai_text,
    invoke_create,
)

__all__ = [
    "ChatCompletionsClient",
    "ClientFactory",
    "default_client_factory",
    "build_wire_messages",
    "build_chat_params",
    "invoke_create",
    "build_failure",
    "extract_openai_text",
    "fetch_remote_models",
    "resolve_limits",
    "to_catalog_entry",
    "sort_key",
    "build_catalog",
]
