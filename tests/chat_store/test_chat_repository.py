"""
Tests for key-value storage and chat persistence.
"""

import json

import pytest

from notestream.core.chat_store import ChatRepository, InMemoryStorage, JsonFileStorage
from notestream.services.chat_service import seed_chats
from notestream.utils.exceptions import StorageError


class TestInMemoryStorage:
    def test_get_set_delete(self):
        storage = InMemoryStorage()

        assert storage.get("chats") is None
        storage.set("chats", "[]")
        assert storage.get("chats") == "[]"
        storage.delete("chats")
        storage.delete("chats")
        assert storage.get("chats") is None


class TestJsonFileStorage:
    """Test directory-backed storage."""

    def test_missing_key(self, tmp_path):
        assert JsonFileStorage(tmp_path).get("chats") is None

    def test_set_creates_directory(self, tmp_path):
        directory = tmp_path / "state"
        storage = JsonFileStorage(directory)

        storage.set("chats", '[{"id": "chat-1"}]')

        assert (directory / "chats.json").read_text(encoding="utf-8") == '[{"id": "chat-1"}]'
        assert storage.get("chats") == '[{"id": "chat-1"}]'
        assert not (directory / "chats.json.tmp").exists()

    def test_overwrite(self, tmp_path):
        storage = JsonFileStorage(tmp_path)

        storage.set("chats", "old")
        storage.set("chats", "new")

        assert storage.get("chats") == "new"

    def test_delete(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        storage.set("chats", "[]")

        storage.delete("chats")
        storage.delete("chats")

        assert storage.get("chats") is None

    def test_invalid_key(self, tmp_path):
        storage = JsonFileStorage(tmp_path)

        with pytest.raises(StorageError):
            storage.set("../escape", "x")
        with pytest.raises(StorageError):
            storage.get("a/b")


class TestChatRepository:
    """Test chat blob persistence."""

    def test_load_missing(self):
        assert ChatRepository(InMemoryStorage()).load() is None

    def test_save_and_load(self):
        repository = ChatRepository(InMemoryStorage())
        chats = seed_chats()

        repository.save(chats)

        assert repository.load() == chats

    def test_blob_uses_camel_case(self):
        storage = InMemoryStorage()
        repository = ChatRepository(storage, key="chats")

        repository.save(seed_chats())

        blob = json.loads(storage.get("chats"))
        assert blob[0]["contactId"] == "contact-1"
        assert blob[0]["unreadCount"] == 1
        assert blob[0]["lastMessage"]["senderId"] == "contact-1"
        assert "isTyping" not in blob[0]
        assert "is_typing" not in blob[0]

    def test_typing_state_not_saved(self):
        repository = ChatRepository(InMemoryStorage())
        chats = [chat.model_copy(update={"is_typing": True}) for chat in seed_chats()]

        repository.save(chats)

        assert all(chat.is_typing is False for chat in repository.load())

    def test_corrupt_blob(self):
        storage = InMemoryStorage()
        storage.set("chats", '{"not": "a list"}')

        with pytest.raises(StorageError, match="Stored chats are invalid"):
            ChatRepository(storage).load()

    def test_corrupt_chat_entry(self):
        """Test validation errors quoting the bad input still become StorageError."""
        storage = InMemoryStorage()
        storage.set("chats", json.dumps([{"id": "chat-1", "unexpected": {"nested": True}}]))

        with pytest.raises(StorageError):
            ChatRepository(storage).load()

    def test_file_round_trip(self, tmp_path):
        repository = ChatRepository(JsonFileStorage(tmp_path))
        chats = seed_chats()

        repository.save(chats)

        assert ChatRepository(JsonFileStorage(tmp_path)).load() == chats
