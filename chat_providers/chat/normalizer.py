"""Message history normalization.

Two passes run before a history leaves the process:

1. Reference injection. A ``user`` message whose text contains the
   ``CONTEXT FILES:`` marker has each ``### <name>.pdf`` line looked up in an
   ``AttachmentStore`` under ``<name>``. A hit replaces the line with
   ``### <name>.pdf (Extracted Content)`` followed by the extracted text; a miss
   leaves the line as is. One input line yields one output line.
2. Role normalization. Tagged assistant roles (``ai-<model-name>``) become
   ``assistant``; plain roles pass through, so the pass is idempotent.

Input messages are never mutated; new ``Message`` objects are returned.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from ..base.models import ContentPart, Message
from ..config.defaults import CONTEXT_FILES_MARKER
from .attachments import AttachmentStore
from .roles import is_tagged_assistant

_REFERENCE_PREFIX = "### "
_REFERENCE_SUFFIX = ".pdf"
_INJECTED_LABEL = "(Extracted Content)"

MessageLike = Union[Message, Mapping[str, Any]]


class MessageHistoryNormalizer:
    """Rewrite a chat history into the shape adapters accept."""

    def __init__(self, store: Optional[AttachmentStore] = None, marker: str = CONTEXT_FILES_MARKER) -> None:
        self.store = store
        self.marker = marker

    @staticmethod
    def normalize_role(role: str) -> str:
        return "assistant" if is_tagged_assistant(role) else role

    def normalize_roles(self, messages: Iterable[Message]) -> List[Message]:
        return [m if m.role == self.normalize_role(m.role) else m.with_role(self.normalize_role(m.role)) for m in messages]

    def inject_lines(self, lines: Sequence[str]) -> List[str]:
        """Return ``lines`` with every resolvable reference line expanded."""
        return [self._expand_line(line) for line in lines]

    def _expand_line(self, line: str) -> str:
        if self.store is None or not (line.startswith(_REFERENCE_PREFIX) and line.endswith(_REFERENCE_SUFFIX)):
            return line
        name = line[len(_REFERENCE_PREFIX):-len(_REFERENCE_SUFFIX)]
        if not name:
            return line
        content = self.store.get_extracted_text(name)
        if content is None:
            return line
        return f"{line} {_INJECTED_LABEL}\n{content}"

    def _inject_text(self, text: str) -> str:
        if self.marker not in text:
            return text
        return "\n".join(self.inject_lines(text.split("\n")))

    def inject_references(self, message: Message) -> Message:
        """Expand reference lines of a ``user`` message carrying the marker."""
        if message.role != "user":
            return message
        if isinstance(message.content, str):
            injected = self._inject_text(message.content)
            return message if injected == message.content else message.with_content(injected)
        parts = tuple(
            ContentPart.of_text(self._inject_text(p.text)) if p.type == "text" and p.text else p
            for p in message.content
        )
        return message if parts == message.content else message.with_content(parts)

    def normalize(self, messages: Iterable[MessageLike]) -> List[Message]:
        """Run reference injection then role normalization over ``messages``."""
        coerced = [m if isinstance(m, Message) else Message.from_dict(m) for m in messages]
        return self.normalize_roles(self.inject_references(m) for m in coerced)


__all__ = ["MessageHistoryNormalizer", "MessageLike"]
