"""Role tags used by chat transcripts.

Assistant turns are recorded as ``ai-<model-name>`` so a transcript shows
which model produced each reply; user turns are ``user``. Before a history is
sent to a provider every tagged role collapses to ``assistant``.
"""
from __future__ import annotations

from typing import Optional

ASSISTANT_TAG_PREFIX = "ai-"
USER_ROLE = "user"


def assistant_role_tag(model_name: str) -> str:
    """Return the transcript role for a reply produced by ``model_name``."""
    return f"{ASSISTANT_TAG_PREFIX}{model_name}"


def is_tagged_assistant(role: str) -> bool:
    return role.startswith(ASSISTANT_TAG_PREFIX)


def model_name_from_role(role: str) -> Optional[str]:
    """Return the model name carried by a tagged role, else ``None``."""
    if not is_tagged_assistant(role):
        return None
    return role[len(ASSISTANT_TAG_PREFIX):]


__all__ = [
    "ASSISTANT_TAG_PREFIX",
    "USER_ROLE",
    "assistant_role_tag",
    "is_tagged_assistant",
    "model_name_from_role",
]
