"""
Simulated chat service.

Mock contacts, seeded demo threads, and a local auto-reply that shows a
typing indicator before answering. Every mutation builds a new chat list
and persists it through the repository.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

from notestream.config import ChatConfig
from notestream.core.chat_store.chat_repository import ChatRepository
from notestream.models.chat import (
    Chat,
    Contact,
    Message,
    MessageStatus,
    MessageType,
    PresenceStatus,
    User,
)
from notestream.utils.exceptions import NotFoundError, ValidationError
from notestream.utils.id_generator import generate_chat_id, generate_message_id
from notestream.utils.logger import get_logger

logger = get_logger(__name__)

CURRENT_USER = User(
    id="user-1",
    name="Me",
    avatar="👤",
    status=PresenceStatus.ONLINE,
    about="Hey there! I am using NoteStream chat",
)


def default_contacts(now: datetime | None = None) -> list[Contact]:
    """Mock contacts shown in the contact picker."""
    now = now or datetime.now()
    return [
        Contact(
            id="contact-1",
            name="Budi Santoso",
            avatar="👨",
            status=PresenceStatus.ONLINE,
            phone_number="+62 812-3456-7890",
            about="Busy",
        ),
        Contact(
            id="contact-2",
            name="Siti Nurhaliza",
            avatar="👩",
            status=PresenceStatus.ONLINE,
            phone_number="+62 813-4567-8901",
            about="Available",
        ),
        Contact(
            id="contact-3",
            name="Ahmad Wijaya",
            avatar="🧑",
            status=PresenceStatus.OFFLINE,
            last_seen=now - timedelta(hours=1),
            phone_number="+62 814-5678-9012",
            about="At work",
        ),
        Contact(
            id="contact-4",
            name="Dewi Lestari",
            avatar="👩‍💼",
            status=PresenceStatus.ONLINE,
            phone_number="+62 815-6789-0123",
            about="Coffee lover ☕",
        ),
        Contact(
            id="contact-5",
            name="Rudi Hartono",
            avatar="👨‍💻",
            status=PresenceStatus.OFFLINE,
            last_seen=now - timedelta(hours=2),
            phone_number="+62 816-7890-1234",
            about="Developer",
        ),
    ]


AUTO_REPLIES: dict[str, list[str]] = {
    "contact-1": ["Hi! How are you?", "What's up?", "Okay, talk later", "Sure!"],
    "contact-2": ["Hi! A bit busy now", "Hold on, in a meeting", "Okay, I'll let you know", "Thanks!"],
    "contact-3": ["Sorry for the late reply", "On my way", "Okay, see you!"],
    "contact-4": ["Hello! Anything I can help with?", "Interesting!", "Okay, noted"],
    "contact-5": ["Yo! What's up?", "Cool!", "Alright, catch you later"],
}
FALLBACK_REPLY = "Okay!"


def seed_chats(now: datetime | None = None) -> list[Chat]:
    """Demo threads created the first time the messenger starts."""
    now = now or datetime.now()
    chats = [
        Chat(
            id="chat-1",
            contact_id="contact-1",
            unread_count=1,
            messages=[
                Message(
                    id="msg-1",
                    chat_id="chat-1",
                    sender_id="contact-1",
                    content="Hi! How are you?",
                    timestamp=now - timedelta(hours=1),
                    status=MessageStatus.READ,
                ),
                Message(
                    id="msg-2",
                    chat_id="chat-1",
                    sender_id=CURRENT_USER.id,
                    content="Good! You?",
                    timestamp=now - timedelta(seconds=3500),
                    status=MessageStatus.READ,
                ),
                Message(
                    id="msg-3",
                    chat_id="chat-1",
                    sender_id="contact-1",
                    content="Doing well too",
                    timestamp=now - timedelta(minutes=5),
                    status=MessageStatus.DELIVERED,
                ),
            ],
        ),
        Chat(
            id="chat-2",
            contact_id="contact-2",
            unread_count=0,
            messages=[
                Message(
                    id="msg-4",
                    chat_id="chat-2",
                    sender_id=CURRENT_USER.id,
                    content="Hi Siti!",
                    timestamp=now - timedelta(hours=2),
                    status=MessageStatus.READ,
                ),
                Message(
                    id="msg-5",
                    chat_id="chat-2",
                    sender_id="contact-2",
                    content="Hi! What's up?",
                    timestamp=now - timedelta(seconds=7100),
                    status=MessageStatus.READ,
                ),
            ],
        ),
    ]
    return [
        chat.model_copy(update={"last_message": chat.messages[-1]}) if chat.messages else chat
        for chat in chats
    ]


class ChatService:
    """
    Chat threads for the simulated messenger.

    Holds the current chat list and replaces it wholesale on every change.
    """

    def __init__(
        self,
        repository: ChatRepository,
        config: ChatConfig | None = None,
        contacts: list[Contact] | None = None,
        current_user: User = CURRENT_USER,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize chat service.

        Args:
            repository: Persistence for the chat list
            config: Auto-reply delay configuration
            contacts: Contact list (defaults to the mock contacts)
            current_user: The local user
            rng: Random source for reply choice and delays
            sleep: Awaitable sleep used between auto-reply steps
        """
        self.repository = repository
        self.config = config or ChatConfig()
        self.contacts = contacts if contacts is not None else default_contacts()
        self.current_user = current_user
        self.rng = rng or random.Random()
        self.sleep = sleep
        self._chats: list[Chat] = []

    @property
    def chats(self) -> list[Chat]:
        return list(self._chats)

    def initialize(self) -> list[Chat]:
        """Load persisted chats, or seed and persist the demo threads."""
        stored = self.repository.load()
        if stored is not None:
            self._chats = stored
            logger.info(f"Loaded {len(stored)} chats")
        else:
            self._commit(seed_chats())
            logger.info("Seeded demo chats")
        return self.chats

    def get_contact(self, contact_id: str) -> Contact | None:
        return next((c for c in self.contacts if c.id == contact_id), None)

    def get_chat(self, chat_id: str) -> Chat:
        """
        Raises:
            NotFoundError: If no chat has this id
        """
        chat = next((c for c in self._chats if c.id == chat_id), None)
        if chat is None:
            raise NotFoundError(f"Chat not found: {chat_id}", context={"chat_id": chat_id})
        return chat

    def send_message(self, chat_id: str, content: str, sender_id: str | None = None) -> Message:
        """
        Append a text message to a chat.

        Raises:
            ValidationError: If the message is blank
            NotFoundError: If no chat has this id
        """
        if not content or not content.strip():
            raise ValidationError("Message cannot be empty", context={"chat_id": chat_id})
        self.get_chat(chat_id)

        message = Message(
            id=generate_message_id(),
            chat_id=chat_id,
            sender_id=sender_id or self.current_user.id,
            content=content,
            timestamp=datetime.now(),
            status=MessageStatus.SENT,
            type=MessageType.TEXT,
        )
        self._commit(
            [
                chat.model_copy(
                    update={"messages": [*chat.messages, message], "last_message": message}
                )
                if chat.id == chat_id
                else chat
                for chat in self._chats
            ]
        )
        logger.bind(chat_id=chat_id, message_id=message.id).debug("Message sent in {}", chat_id)
        return message

    def mark_messages_as_read(self, chat_id: str) -> Chat:
        """Mark every message from the contact as read and reset the unread counter."""
        self.get_chat(chat_id)
        self._commit(
            [
                chat.model_copy(
                    update={
                        "messages": [
                            msg
                            if msg.sender_id == self.current_user.id
                            else msg.model_copy(update={"status": MessageStatus.READ})
                            for msg in chat.messages
                        ],
                        "unread_count": 0,
                    }
                )
                if chat.id == chat_id
                else chat
                for chat in self._chats
            ]
        )
        return self.get_chat(chat_id)

    def update_message_status(self, message_id: str, status: MessageStatus) -> None:
        """Set the delivery status of a message wherever it appears."""
        self._commit(
            [
                chat.model_copy(
                    update={
                        "messages": [
                            msg.model_copy(update={"status": status}) if msg.id == message_id else msg
                            for msg in chat.messages
                        ]
                    }
                )
                for chat in self._chats
            ]
        )

    def create_new_chat(self, contact_id: str) -> Chat:
        """
        Open a chat with a contact, reusing an existing thread if there is one.

        Raises:
            NotFoundError: If the contact doesn't exist
        """
        if self.get_contact(contact_id) is None:
            raise NotFoundError(f"Contact not found: {contact_id}", context={"contact_id": contact_id})
        existing = next((c for c in self._chats if c.contact_id == contact_id), None)
        if existing is not None:
            return existing

        chat = Chat(id=generate_chat_id(), contact_id=contact_id)
        self._commit([chat, *self._chats])
        logger.bind(chat_id=chat.id, contact_id=contact_id).info("Chat created: {}", chat.id)
        return chat

    def set_typing_status(self, chat_id: str, is_typing: bool) -> None:
        """Toggle the typing indicator. Transient: not persisted."""
        self._chats = [
            chat.model_copy(update={"is_typing": is_typing}) if chat.id == chat_id else chat
            for chat in self._chats
        ]

    def search(self, query: str) -> list[Chat]:
        """Chats whose contact name contains the query, case-insensitively."""
        needle = query.lower()
        return [
            chat
            for chat in self._chats
            if (contact := self.get_contact(chat.contact_id)) and needle in contact.name.lower()
        ]

    def available_contacts(self) -> list[Contact]:
        """Contacts that don't have a chat yet."""
        taken = {chat.contact_id for chat in self._chats}
        return [contact for contact in self.contacts if contact.id not in taken]

    async def simulate_auto_reply(self, chat_id: str, contact_id: str) -> Message:
        """
        Make the contact "type" for a moment and then answer.

        Returns:
            The reply message
        """
        replies = AUTO_REPLIES.get(contact_id) or [FALLBACK_REPLY]
        reply = self.rng.choice(replies)

        await self.sleep(self.rng.uniform(self.config.typing_delay_min, self.config.typing_delay_max))
        self.set_typing_status(chat_id, True)

        await self.sleep(self.rng.uniform(self.config.reply_delay_min, self.config.reply_delay_max))
        self.set_typing_status(chat_id, False)
        message = self.send_message(chat_id, reply, sender_id=contact_id)
        self._commit(
            [
                chat.model_copy(update={"unread_count": chat.unread_count + 1})
                if chat.id == chat_id
                else chat
                for chat in self._chats
            ]
        )
        logger.bind(chat_id=chat_id, contact_id=contact_id).debug("Auto-reply in {}", chat_id)
        return message

    def _commit(self, chats: list[Chat]) -> None:
        self._chats = chats
        self.repository.save(chats)
