"""
Tests for data models.
"""

import base64

from notestream.models import (
    AudioRecording,
    CapturedFrame,
    Chat,
    GenerationRequest,
    MediaPayload,
    Message,
    Note,
    RequestKind,
    SessionStatus,
    StreamMode,
    StreamSession,
)


class TestNote:
    """Test Note model."""

    def test_defaults(self):
        note = Note(id="note_1")

        assert note.title == ""
        assert note.content == ""
        assert note.images == []
        assert note.created_at is not None

    def test_content_preview(self):
        note = Note(id="note_1", content="x" * 150)

        assert note.content_preview == "x" * 100
        assert Note(id="note_2", content="short").content_preview == "short"

    def test_is_empty(self):
        assert Note(id="note_1").is_empty()
        assert Note(id="note_1", content=" \n\t").is_empty()
        assert not Note(id="note_1", content="text").is_empty()


class TestMedia:
    """Test media payloads."""

    def test_base64_and_data_url(self):
        payload = MediaPayload(data=b"hello", mime_type="image/png")

        assert payload.base64_data == base64.b64encode(b"hello").decode()
        assert payload.data_url == f"data:image/png;base64,{payload.base64_data}"

    def test_from_base64(self):
        encoded = base64.b64encode(b"audio").decode()

        recording = AudioRecording.from_base64(encoded, "audio/webm")

        assert isinstance(recording, AudioRecording)
        assert recording.data == b"audio"

    def test_from_data_url(self):
        encoded = base64.b64encode(b"jpeg").decode()

        frame = CapturedFrame.from_base64(f"data:image/jpeg;base64,{encoded}", "image/jpeg")

        assert isinstance(frame, CapturedFrame)
        assert frame.data == b"jpeg"

    def test_defaults(self):
        assert CapturedFrame(data=b"x").mime_type == "image/jpeg"
        assert AudioRecording(data=b"").is_empty()
        assert not AudioRecording(data=b"x").is_empty()


class TestSessionModels:
    """Test streaming session models."""

    def test_session_defaults(self):
        session = StreamSession(id="sess_1", target_id="note_1", mode=StreamMode.REPLACE)

        assert session.status == SessionStatus.RUNNING
        assert session.accumulator == ""
        assert session.chunks_applied == 0
        assert session.finished_at is None

    def test_request_with_media(self):
        request = GenerationRequest(
            kind=RequestKind.DESCRIBE_IMAGE,
            text="What is this?",
            media=CapturedFrame(data=b"x"),
        )

        assert request.media.mime_type == "image/jpeg"


class TestChatModels:
    """Test chat models and their camelCase layout."""

    def test_populate_by_alias_and_name(self):
        by_alias = Chat.model_validate({"id": "chat-1", "contactId": "contact-1", "unreadCount": 2})
        by_name = Chat(id="chat-1", contact_id="contact-1", unread_count=2)

        assert by_alias == by_name

    def test_dump_by_alias_excludes_typing(self):
        chat = Chat(id="chat-1", contact_id="contact-1", is_typing=True)

        dumped = chat.model_dump(by_alias=True)

        assert dumped["contactId"] == "contact-1"
        assert "isTyping" not in dumped

    def test_message_defaults(self):
        message = Message(id="msg-1", chat_id="chat-1", sender_id="user-1", content="hi")

        assert message.status.value == "sent"
        assert message.type.value == "text"
