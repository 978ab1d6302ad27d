"""
Persistence of chat threads as a single JSON blob.
"""

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from notestream.core.chat_store.storage import KeyValueStorage
from notestream.models.chat import Chat
from notestream.utils.exceptions import StorageError
from notestream.utils.logger import get_logger

logger = get_logger(__name__)

_chats_adapter = TypeAdapter(list[Chat])


class ChatRepository:
    """
    Loads and saves the whole chat list under one storage key.

    The blob is a JSON array of chats with camelCase field names.
    Transient state (typing indicators) is not written.
    """

    def __init__(self, storage: KeyValueStorage, key: str = "chats"):
        self.storage = storage
        self.key = key

    def load(self) -> list[Chat] | None:
        """
        Read the persisted chats.

        Returns:
            The stored chats, or None if nothing has been saved yet

        Raises:
            StorageError: If the stored blob is not a valid chat list
        """
        raw = self.storage.get(self.key)
        if raw is None:
            return None
        try:
            chats = _chats_adapter.validate_json(raw)
        except PydanticValidationError as e:
            logger.bind(key=self.key).error("Corrupt chat blob under key {}: {}", self.key, e)
            raise StorageError(f"Stored chats are invalid: {e}", context={"key": self.key}) from e
        logger.bind(key=self.key).debug("Loaded {} chats", len(chats))
        return chats

    def save(self, chats: list[Chat]) -> None:
        """Serialize and store the full chat list."""
        self.storage.set(self.key, self.dumps(chats))

    @staticmethod
    def dumps(chats: list[Chat]) -> str:
        return _chats_adapter.dump_json(chats, by_alias=True).decode("utf-8")
