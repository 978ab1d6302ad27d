"""Key-value storage and chat persistence."""

from notestream.core.chat_store.chat_repository import ChatRepository
from notestream.core.chat_store.storage import InMemoryStorage, JsonFileStorage, KeyValueStorage

__all__ = [
    "KeyValueStorage",
    "InMemoryStorage",
    "JsonFileStorage",
    "ChatRepository",
]
