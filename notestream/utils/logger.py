"""
Logging configuration using Loguru.

Context is attached with `logger.bind(...)` and values are passed to the
message as positional `{}` arguments. Provider error text often quotes JSON,
so it must never be baked into the format string itself.
"""

import sys
from pathlib import Path

from loguru import logger

# Bound fields worth showing on the console, in display order
CONSOLE_CONTEXT_KEYS = ("session_id", "note_id", "chat_id", "mode", "model", "error_type")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def console_format(record) -> str:
    """Console line with the bound streaming/chat context appended."""
    keys = [key for key in CONSOLE_CONTEXT_KEYS if key in record["extra"]]
    line = CONSOLE_FORMAT
    if keys:
        # Loguru substitutes the values, so braces inside them stay literal
        line += " <dim>[" + " ".join(f"{key}={{extra[{key}]}}" for key in keys) + "]</dim>"
    return line + "\n{exception}"


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = False,
    log_dir: str = "logs",
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
    compression: str = "zip",
    serialize: bool = True,
) -> None:
    """
    Configure Loguru with a context-aware console sink.

    With `log_to_file` a rotating file sink is added. It is JSON-serialized
    by default, so every bound field lands in the record.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=console_format, colorize=True)

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / "notestream_{time:YYYY-MM-DD}.log",
            level=level,
            format=FILE_FORMAT,
            rotation=file_rotation,
            retention=file_retention,
            compression=compression,
            serialize=serialize,
            enqueue=True,
        )


def get_logger(name: str):
    """Logger bound to a module name; bind further context per call site."""
    return logger.bind(module=name)
