"""Timed execution of bound commands with output parameter extraction."""

import logging
import time
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from mypy_extensions import trait
from typing_extensions import TypeVar

from dbfunc.utils.logging import log_with_context

if TYPE_CHECKING:
    from dbfunc.config import CommandServiceConfig
    from dbfunc.core.command import BoundCommand

__all__ = ("CommandExecutorMixin", "format_timestamp")

T = TypeVar("T")


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ``hh:mm:ss:ffff AM``."""
    return f"{moment:%I:%M:%S}:{moment.microsecond // 100:04d} {moment:%p}"


@trait
class CommandExecutorMixin:
    """Runs a unit of work against a bound command."""

    __slots__ = ()
    config: "CommandServiceConfig"

    @property
    def logger(self) -> logging.Logger:
        raise NotImplementedError

    def _should_log(self, logger: logging.Logger) -> bool:
        return logger.isEnabledFor(logging.DEBUG) and not self.config.suppress_logging

    def execute(self, bound: "BoundCommand", func: "Callable[[], T]") -> T:
        """Call ``func`` once, timing and logging it, then copy output values back.

        Exceptions raised by ``func`` propagate unchanged and no output
        values are copied.

        Args:
            bound: The command ``func`` runs.
            func: Zero-argument callable performing the database call.

        Returns:
            Whatever ``func`` returns.
        """
        timestamp = format_timestamp(datetime.now())
        logger = self.logger
        command = bound.command
        user_name = self.config.user_name
        environment_name = self.config.environment_name

        if self._should_log(logger):
            log_with_context(
                logger,
                logging.DEBUG,
                f"Executing the command [{command.command_text}] ... "
                f"[User:={user_name}, Environment:={environment_name}, Timestamp:={timestamp}]",
                command_text=command.command_text,
                user=user_name,
                environment=environment_name,
            )

        start = time.perf_counter()
        value = func()

        if self._should_log(logger):
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            log_with_context(
                logger,
                logging.DEBUG,
                f"Executed the command [{command.command_text}] successfully in {elapsed_ms} milliseconds! "
                f"[User:={user_name}, Environment:={environment_name}, Timestamp:={timestamp}]",
                command_text=command.command_text,
                user=user_name,
                environment=environment_name,
                elapsed_ms=elapsed_ms,
            )

        if bound.parameters is not None:
            for parameter in command.output_parameters:
                bound.parameters[parameter.name].value = parameter.value

        return value
