"""Message and catalogue types shared by adapters and the chat layer."""

from .models_parts.content_part import ContentPart, ContentPartType
from .models_parts.message import PLAIN_ROLES, Content, Message, Role
from .models_parts.model_catalog_entry import ModelCatalogEntry, Pricing

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
