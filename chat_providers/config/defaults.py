"""Built-in default values.

Plain constants only: this module performs no I/O and imports nothing from the
rest of the package, so any layer may depend on it. Configuration files and
environment variables override the provider values through
``chat_providers.config.get_provider_config``.
"""

from __future__ import annotations

# ---- Request shaping ----
# Sampling temperature forwarded on conversation requests unless the profile
# disables temperature for the selected model.
DEFAULT_TEMPERATURE = 0.7
# Context/output token limit used when neither a profile override nor the
# remote catalogue reports one.
DEFAULT_TOKEN_LIMIT = 4096
# Characters per token for the shared token estimator.
CHARS_PER_TOKEN = 4
# Per-message overhead added by count_conversation_tokens (role and framing).
MESSAGE_TOKEN_OVERHEAD = 4

# ---- HTTP ----
# Catalogue requests (seconds).
HTTP_TIMEOUT_SECONDS = 30.0
# Key validation probe (seconds); the probe never retries.
VALIDATION_TIMEOUT_SECONDS = 10.0

# ---- Chat layer ----
DEFAULT_PROVIDER = "openai"
# Marker that enables reference-block injection in user messages.
CONTEXT_FILES_MARKER = "CONTEXT FILES:"
# File name looked up under each attachment directory.
EXTRACTED_CONTENT_FILENAME = "extracted_content.md"

# Per-provider endpoints and models
OPENAI_DEFAULT_MODEL = "gpt-4o"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"

OPENROUTER_DEFAULT_MODEL = "openrouter/auto"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
DEEPSEEK_DEFAULT_BASE_URL = "https://api.deepseek.com/v1"

# Anthropic through its OpenAI-compatible endpoint.
ANTHROPIC_DEFAULT_MODEL = "claude-3-5-sonnet-latest"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com/v1"


__all__ = [
    "DEFAULT_TEMPERATURE",
    "DEFAULT_TOKEN_LIMIT",
    "CHARS_PER_TOKEN",
    "MESSAGE_TOKEN_OVERHEAD",
    "HTTP_TIMEOUT_SECONDS",
    "VALIDATION_TIMEOUT_SECONDS",
    "DEFAULT_PROVIDER",
    "CONTEXT_FILES_MARKER",
    "EXTRACTED_CONTENT_FILENAME",
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_DEFAULT_BASE_URL",
    "OPENROUTER_DEFAULT_MODEL",
    "OPENROUTER_DEFAULT_BASE_URL",
    "DEEPSEEK_DEFAULT_MODEL",
    "DEEPSEEK_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_BASE_URL",
]
