"""
Services for NoteStream.

High-level application services:
- StreamingAppendController: Folds streamed backend output into notes
- NoteAssistant: Note-taking actions (summarize, ask, voice, camera, images)
- ChatService: Simulated messenger with auto-replies
"""

from notestream.services.chat_service import ChatService
from notestream.services.note_assistant import NoteAssistant
from notestream.services.streaming_controller import (
    StreamingAppendController,
    fold_chunk,
    fold_chunks,
)

__all__ = [
    "StreamingAppendController",
    "fold_chunk",
    "fold_chunks",
    "NoteAssistant",
    "ChatService",
]
