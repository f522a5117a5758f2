"""Chat message type.

``role`` stays a free string: histories coming from an application may carry
tagged assistant roles like ``"ai-gpt-4o"``, which only the history normalizer
rewrites. What reaches an adapter uses one of ``PLAIN_ROLES``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Tuple, Union

from .content_part import ContentPart

Role = Literal["system", "user", "assistant"]
PLAIN_ROLES: Tuple[str, ...] = ("system", "user", "assistant")

Content = Union[str, Tuple[ContentPart, ...]]


@dataclass(frozen=True)
class Message:
    """One turn of a conversation: a role plus text or ordered parts.

    Lists given as ``content`` are frozen into tuples.
    """

    role: str
    content: Content

    def __post_init__(self) -> None:
        if isinstance(self.content, list):
            object.__setattr__(self, "content", tuple(self.content))

    def is_structured(self) -> bool:
        return not isinstance(self.content, str)

    def has_image(self) -> bool:
        if isinstance(self.content, str):
            return False
        return any(part.is_image for part in self.content)

    def text_or_joined(self) -> str:
        """Plain text view; parts are newline-joined and images show as ``[image_url]``."""
        if isinstance(self.content, str):
            return self.content
        return "\n".join(part.text or f"[{part.type}]" for part in self.content)

    def with_role(self, role: str) -> "Message":
        return Message(role, self.content)

    def with_content(self, content: Content) -> "Message":
        return Message(self.role, content)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        role = str(data["role"])
        raw = data.get("content", "")
        if not isinstance(raw, list):
            return cls(role, str(raw))
        return cls(role, tuple(ContentPart.from_dict(item) for item in raw))

    def to_openai(self) -> Dict[str, Any]:
        if isinstance(self.content, str):
            body: Any = self.content
        else:
            body = [part.to_openai() for part in self.content]
        return {"role": self.role, "content": body}


__all__ = ["Message", "Role", "PLAIN_ROLES", "Content"]
