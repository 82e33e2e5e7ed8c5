"""This module defines the Chat document stored in the ``chat`` collection."""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from chat_service.repositories.interactions.models.document import DocumentModel


class ChatType(str, Enum):
    """Kinds of chat. ``personal`` is the default."""

    PERSONAL = "personal"
    GROUP = "group"
    ARCHIVE = "archive"


class MessageType(str, Enum):
    """Content carried by a message."""

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "document"
    STICKER = "sticker"


class Message(DocumentModel):
    """Snapshot of a message, embedded in a chat as its last message."""

    id: str
    chat_id: str
    from_id: str
    create_date: int = 0
    type: MessageType = MessageType.TEXT
    media: str = Field(default="", description="Link to previously uploaded content.")
    body: str = ""
    update_at: int = 0
    viewed: bool = False
    reaction: Optional[str] = None


class Chat(DocumentModel):
    """Represents a chat document.

    Attributes:
        id (str): Globally unique chat identifier.
        title (str): Chat title, may be empty.
        create_date (int): Creation time in epoch milliseconds.
        type (ChatType): personal, group or archive.
        participants (List[str]): Ordered participant user ids.
        deleted (bool): Soft-delete flag.
        owner_id (str): User id of the owner.
        unread (int): Unread counter.
        pinned_messages (Optional[List[str]]): Pinned message ids.
        label (Optional[str]): Free-form label.
        pinned_message_id (Optional[str]): Currently pinned message.
        last_message (Optional[Message]): Snapshot of the latest message.
    """

    id: str
    title: str = ""
    create_date: int = 0
    type: ChatType = ChatType.PERSONAL
    participants: List[str] = Field(default_factory=list)
    deleted: bool = False
    owner_id: str = ""
    unread: int = 0
    pinned_messages: Optional[List[str]] = None
    label: Optional[str] = None
    pinned_message_id: Optional[str] = None
    last_message: Optional[Message] = None
