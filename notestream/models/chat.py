"""
Chat models for the simulated messenger.

Field names serialize in camelCase (`contactId`, `unreadCount`, ...) so the
persisted blob keeps the layout the browser client reads.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PresenceStatus(str, Enum):
    """Online presence of a user or contact."""

    ONLINE = "online"
    OFFLINE = "offline"


class MessageStatus(str, Enum):
    """Delivery status of a message."""

    SENDING = "sending"
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"


class MessageType(str, Enum):
    """Message payload type."""

    TEXT = "text"
    IMAGE = "image"


class ChatModel(BaseModel):
    """Base for chat models: camelCase aliases, populate by field name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class User(ChatModel):
    """The local user of the messenger."""

    id: str
    name: str
    avatar: str = ""
    status: PresenceStatus = PresenceStatus.ONLINE
    about: str = ""


class Contact(ChatModel):
    """A mock contact that can be chatted with."""

    id: str
    name: str
    avatar: str = ""
    status: PresenceStatus = PresenceStatus.OFFLINE
    last_seen: datetime | None = None
    phone_number: str = ""
    about: str = ""


class Message(ChatModel):
    """A single chat message."""

    id: str
    chat_id: str
    sender_id: str
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)
    status: MessageStatus = MessageStatus.SENT
    type: MessageType = MessageType.TEXT


class Chat(ChatModel):
    """
    A chat thread with one contact.

    `is_typing` is transient UI state and is never persisted.
    """

    id: str
    contact_id: str
    messages: list[Message] = Field(default_factory=list)
    unread_count: int = 0
    last_message: Message | None = None
    is_typing: bool = Field(default=False, exclude=True)
