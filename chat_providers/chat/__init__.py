"""Chat layer: transcript roles, history normalization and the conversation streamer."""

from .attachments import AttachmentStore, DirectoryAttachmentStore, MappingAttachmentStore
from .normalizer import MessageHistoryNormalizer
from .roles import assistant_role_tag, is_tagged_assistant, model_name_from_role
from .streamer import ConversationStreamer, StreamResult

__all__ = [
    "AttachmentStore",
    "DirectoryAttachmentStore",
    "MappingAttachmentStore",
    "MessageHistoryNormalizer",
    "assistant_role_tag",
    "is_tagged_assistant",
    "model_name_from_role",
    "ConversationStreamer",
    "StreamResult",
]
