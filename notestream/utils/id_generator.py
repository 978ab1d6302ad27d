"""
ID generation utilities for NoteStream.

Provides consistent ID generation for all entity types:
- Notes: note_xxx
- Chats: chat_xxx
- Messages: msg_xxx
- Streaming sessions: sess_xxx
"""

from uuid import uuid4


def generate_note_id() -> str:
    """
    Generate unique Note ID.

    Returns:
        ID in format "note_xxx" where xxx is 12 hex characters
    """
    return f"note_{uuid4().hex[:12]}"


def generate_chat_id() -> str:
    """
    Generate unique Chat ID.

    Returns:
        ID in format "chat_xxx" where xxx is 12 hex characters
    """
    return f"chat_{uuid4().hex[:12]}"


def generate_message_id() -> str:
    """
    Generate unique Message ID.

    Returns:
        ID in format "msg_xxx" where xxx is 12 hex characters
    """
    return f"msg_{uuid4().hex[:12]}"


def generate_session_id() -> str:
    """Generate unique streaming session ID ("sess_xxx")."""
    return f"sess_{uuid4().hex[:12]}"
