"""Attachment content stores.

The history normalizer asks a store for the extracted text of a referenced
document by key (the document's file name without ``.pdf``).
``DirectoryAttachmentStore`` serves ``<root>/<key>/extracted_content.md``;
``MappingAttachmentStore`` serves an in-memory mapping.
"""
from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Protocol, Union, runtime_checkable

from ..base.logging import get_logger, log_event
from ..config.defaults import EXTRACTED_CONTENT_FILENAME

_logger = get_logger("chat.attachments")


@runtime_checkable
class AttachmentStore(Protocol):
    def get_extracted_text(self, key: str) -> Optional[str]:
        """Return the extracted text for ``key`` or ``None`` when unknown."""
        ...


class DirectoryAttachmentStore:
    """Read extracted document text from an attachments directory."""

    def __init__(self, root: Union[str, Path], filename: str = EXTRACTED_CONTENT_FILENAME) -> None:
        self.root = Path(root)
        self.filename = filename

    def get_extracted_text(self, key: str) -> Optional[str]:
        # Keys naming anything outside the root are treated as missing.
        if not key or key in {".", ".."} or "/" in key or "\\" in key:
            return None
        path = self.root / key / self.filename
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log_event(_logger, "attachments.read_error", key=key, failure_class=exc.__class__.__name__)
            return None


class MappingAttachmentStore:
    """In-memory store, mainly for tests and embedding applications."""

    def __init__(self, contents: Mapping[str, str]) -> None:
        self._contents = dict(contents)

    def get_extracted_text(self, key: str) -> Optional[str]:
        return self._contents.get(key)


__all__ = ["AttachmentStore", "DirectoryAttachmentStore", "MappingAttachmentStore"]
