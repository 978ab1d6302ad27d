"""
Data models for NoteStream.

Core models:
- Note: A user note, the target of streaming sessions
- MediaPayload, CapturedFrame, AudioRecording: Captured media
- GenerationRequest, StreamSession, StreamOutcome: Streaming sessions
- User, Contact, Message, Chat: Simulated chat
"""

from notestream.models.chat import (
    Chat,
    Contact,
    Message,
    MessageStatus,
    MessageType,
    PresenceStatus,
    User,
)
from notestream.models.media import AudioRecording, CapturedFrame, MediaPayload
from notestream.models.note import Note
from notestream.models.session import (
    GenerationRequest,
    RequestKind,
    SessionStatus,
    StreamMode,
    StreamOutcome,
    StreamSession,
)

__all__ = [
    # Note models
    "Note",
    # Media models
    "MediaPayload",
    "CapturedFrame",
    "AudioRecording",
    # Session models
    "GenerationRequest",
    "RequestKind",
    "StreamMode",
    "SessionStatus",
    "StreamSession",
    "StreamOutcome",
    # Chat models
    "User",
    "Contact",
    "Message",
    "Chat",
    "PresenceStatus",
    "MessageStatus",
    "MessageType",
]
