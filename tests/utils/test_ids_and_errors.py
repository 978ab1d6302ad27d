"""
Tests for ID generation, the exception hierarchy and logging setup.
"""

import pytest
from loguru import logger as loguru_logger

from notestream.utils import exceptions
from notestream.utils.id_generator import (
    generate_chat_id,
    generate_message_id,
    generate_note_id,
    generate_session_id,
)
from notestream.utils.logger import console_format, get_logger, setup_logging


class TestIdGenerator:
    """Test ID generation utilities."""

    @pytest.mark.parametrize(
        "generate, prefix",
        [
            (generate_note_id, "note_"),
            (generate_chat_id, "chat_"),
            (generate_message_id, "msg_"),
            (generate_session_id, "sess_"),
        ],
    )
    def test_prefix_and_length(self, generate, prefix):
        generated = generate()

        assert generated.startswith(prefix)
        assert len(generated) == len(prefix) + 12

    def test_unique(self):
        ids = {generate_note_id() for _ in range(1000)}

        assert len(ids) == 1000


class TestExceptions:
    """Test the exception hierarchy."""

    def test_message_and_context(self):
        error = exceptions.NotFoundError("Note not found", context={"note_id": "note_1"})

        assert str(error) == "Note not found"
        assert error.message == "Note not found"
        assert error.context == {"note_id": "note_1"}

    def test_context_defaults_to_empty(self):
        assert exceptions.LLMError("down").context == {}

    def test_hierarchy(self):
        assert issubclass(exceptions.BillingRequiredError, exceptions.LLMError)
        assert issubclass(exceptions.DevicePermissionError, exceptions.DeviceError)
        for error_type in (
            exceptions.ConfigurationError,
            exceptions.ValidationError,
            exceptions.NotFoundError,
            exceptions.LLMError,
            exceptions.SessionConflictError,
            exceptions.DeviceError,
            exceptions.StorageError,
        ):
            assert issubclass(error_type, exceptions.NoteStreamError)


class TestLogger:
    """Test logging setup."""

    def test_setup_logging_to_file(self, tmp_path):
        setup_logging(level="DEBUG", log_to_file=True, log_dir=str(tmp_path / "logs"), serialize=False)
        logger = get_logger("tests")

        logger.info("hello")

        assert (tmp_path / "logs").is_dir()
        setup_logging(level="INFO")

    def test_console_format_shows_bound_context(self):
        line = console_format({"extra": {"module": "tests", "note_id": "note_1", "error_type": "LLMError"}})

        assert "note_id={extra[note_id]} error_type={extra[error_type]}" in line
        assert "session_id" not in line
        assert line.endswith("\n{exception}")

    def test_console_format_without_context(self):
        line = console_format({"extra": {"module": "tests"}})

        assert "[" not in line
        assert line.endswith("</level>\n{exception}")

    def test_positional_values_keep_braces(self):
        """Test JSON-looking error text is logged verbatim."""
        messages = []
        handler_id = loguru_logger.add(messages.append, format="{message} [{extra[error_type]}]")
        try:
            get_logger("tests").bind(error_type="LLMError").error(
                "Streaming session failed: {}: {}", "sess_1", "Error code: 429 - {'error': {'code': 429}}"
            )
        finally:
            loguru_logger.remove(handler_id)

        assert messages[0].strip() == (
            "Streaming session failed: sess_1: Error code: 429 - {'error': {'code': 429}} [LLMError]"
        )
