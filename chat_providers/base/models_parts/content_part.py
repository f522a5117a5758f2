"""Text and image fragments of multi-part message content."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Literal, Optional

ContentPartType = Literal["text", "image_url"]


@dataclass(frozen=True)
class ContentPart:
    """One fragment of a message body.

    ``text`` is set for ``"text"`` parts; ``image_url`` (http(s) or ``data:``)
    for ``"image_url"`` parts.
    """

    type: ContentPartType
    text: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def of_text(cls, text: str) -> "ContentPart":
        return cls(type="text", text=text)

    @classmethod
    def of_image(cls, url: str) -> "ContentPart":
        return cls(type="image_url", image_url=url)

    @property
    def is_image(self) -> bool:
        return self.type == "image_url"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentPart":
        """Accept the wire shape; ``image_url`` may be a bare string or ``{"url": ...}``."""
        if data.get("type") != "image_url":
            return cls.of_text(str(data.get("text") or ""))
        image = data.get("image_url")
        if isinstance(image, dict):
            image = image.get("url")
        return cls.of_image(str(image))

    def to_openai(self) -> Dict[str, Any]:
        """Chat Completions wire form."""
        if not self.is_image:
            return {"type": "text", "text": self.text or ""}
        return {"type": "image_url", "image_url": {"url": self.image_url}}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["ContentPart", "ContentPartType"]
