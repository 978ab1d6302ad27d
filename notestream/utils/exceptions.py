"""
Custom exception hierarchy for NoteStream.

Provides structured error types for better error handling and debugging.
All exceptions inherit from NoteStreamError for easy catching.
"""


class NoteStreamError(Exception):
    """
    Base exception for all NoteStream errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize NoteStream error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigurationError(NoteStreamError):
    """
    Configuration errors.
    Raised when configuration is invalid or a required credential is missing.
    """

    pass


class ValidationError(NoteStreamError):
    """
    Validation errors.
    Raised when user input is blank or invalid, before any backend call.
    """

    pass


class NotFoundError(NoteStreamError):
    """
    Resource not found errors.
    Raised when a requested note, chat or message doesn't exist.
    """

    pass


class LLMError(NoteStreamError):
    """
    Generative backend errors.
    Raised when backend operations fail (API errors, timeouts, quota, etc.).
    """

    pass


class BillingRequiredError(LLMError):
    """
    Entitlement errors.
    Raised when the backend rejects a request because the account is not billed.
    """

    pass


class SessionConflictError(NoteStreamError):
    """
    Streaming session conflicts.
    Raised when a session is started against a document that already has one in flight.
    """

    pass


class DeviceError(NoteStreamError):
    """
    Capture device errors.
    Raised when a camera or microphone cannot be opened or used.
    """

    pass


class DevicePermissionError(DeviceError):
    """
    Device permission errors.
    Raised when access to a camera or microphone is denied.
    """

    pass


class StorageError(NoteStreamError):
    """
    Key-value storage errors.
    Raised when persisted state cannot be read or written.
    """

    pass
