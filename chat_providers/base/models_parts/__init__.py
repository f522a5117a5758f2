"""Models parts package public surface.

Re-exports individual DTOs; `chat_providers.base.models` remains the primary
stable import path.
"""

from .content_part import ContentPart, ContentPartType
from .message import Content, Message, PLAIN_ROLES, Role
from .model_catalog_entry import ModelCatalogEntry, Pricing

__all__ = [
    "Content",
    "ContentPart",
    "ContentPartType",
    "Message",
    "PLAIN_ROLES",
    "Role",
    "ModelCatalogEntry",
    "Pricing",
]
