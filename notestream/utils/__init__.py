"""Utility modules for NoteStream."""

from notestream.utils.exceptions import (
    BillingRequiredError,
    ConfigurationError,
    DeviceError,
    DevicePermissionError,
    LLMError,
    NoteStreamError,
    NotFoundError,
    SessionConflictError,
    StorageError,
    ValidationError,
)
from notestream.utils.id_generator import (
    generate_chat_id,
    generate_message_id,
    generate_note_id,
    generate_session_id,
)
from notestream.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_note_id",
    "generate_chat_id",
    "generate_message_id",
    "generate_session_id",
    # Exceptions
    "NoteStreamError",
    "ConfigurationError",
    "ValidationError",
    "NotFoundError",
    "LLMError",
    "BillingRequiredError",
    "SessionConflictError",
    "DeviceError",
    "DevicePermissionError",
    "StorageError",
]
