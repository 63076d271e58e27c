"""Logging for dbfunc.

All library loggers live under the ``dbfunc`` namespace. Each command run by
the service executes inside :func:`command_context`, so every record it emits
(pre-execution, post-execution and failure) carries the same
``correlation_id``. Records may also carry an ``extra_fields`` mapping that
:class:`StructuredFormatter` merges into its JSON output.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from dbfunc._serialization import encode_json

if TYPE_CHECKING:
    from collections.abc import Generator
    from logging import LogRecord

__all__ = (
    "CommandContextFilter",
    "StructuredFormatter",
    "command_context",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
)

ROOT_LOGGER_NAME = "dbfunc"
PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

_correlation_id: ContextVar[str | None] = ContextVar("dbfunc_correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the id of the command running in the current context, if any."""
    return _correlation_id.get()


@contextmanager
def command_context(correlation_id: str | None = None) -> Generator[str, None, None]:
    """Tie the records logged inside the block to one correlation id.

    An id already active in the current context is reused, so nested commands
    share their caller's id. Otherwise ``correlation_id`` or a fresh id is set
    for the duration of the block.

    Yields:
        The active correlation id.
    """
    active = _correlation_id.get()
    if active is not None:
        yield active
        return

    correlation_id = correlation_id or uuid4().hex
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)


class CommandContextFilter(logging.Filter):
    """Stamps records with the correlation id of the running command."""

    def filter(self, record: LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id()  # type: ignore[attr-defined]
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            log_entry["correlation_id"] = correlation_id

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            log_entry.update(extra_fields)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return encode_json(log_entry)  # type: ignore[return-value]


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the ``dbfunc`` namespace.

    Args:
        name: Logger name. If not provided, returns the root dbfunc logger.

    Returns:
        Logger whose records carry the current correlation id.
    """
    if name is None:
        name = ROOT_LOGGER_NAME
    elif not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    if not any(isinstance(f, CommandContextFilter) for f in logger.filters):
        logger.addFilter(CommandContextFilter())
    return logger


def configure_logging(
    level: int | str = logging.INFO,
    structured: bool = True,
    log_file: str | None = None,
    handlers: list[logging.Handler] | None = None,
) -> logging.Logger:
    """Route the ``dbfunc`` loggers to stdout, and optionally a file.

    Calling it again replaces the handlers installed earlier.

    Args:
        level: Level name or number for the ``dbfunc`` logger.
        structured: JSON output when true, plain text otherwise.
        log_file: Path of a file that always receives JSON records.
        handlers: Extra handlers, attached as given.

    Returns:
        The configured ``dbfunc`` logger.
    """
    root_logger = get_logger()
    root_logger.setLevel(level.upper() if isinstance(level, str) else level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter() if structured else logging.Formatter(PLAIN_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    for handler in handlers or ():
        root_logger.addHandler(handler)

    # Handlers attached here see records that skipped the per-logger filter.
    for handler in root_logger.handlers:
        if not any(isinstance(f, CommandContextFilter) for f in handler.filters):
            handler.addFilter(CommandContextFilter())

    root_logger.propagate = False
    return root_logger


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log ``message`` with ``extra_fields`` attached for structured output."""
    logger.log(level, message, extra={"extra_fields": extra_fields}, stacklevel=2)
