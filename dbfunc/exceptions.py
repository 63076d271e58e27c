from typing import Any, Optional

__all__ = (
    "DatabaseConnectionError",
    "DbFuncError",
    "DuplicateParameterError",
    "ExecutionError",
    "ImproperConfigurationError",
    "InvalidArgumentError",
    "NoResultError",
    "ParameterError",
    "ParameterNotFoundError",
    "QueryTimeoutError",
)


class DbFuncError(Exception):
    """Base exception class from which all dbfunc exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``DbFuncError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(DbFuncError):
    """Raised when a configuration value is out of range or of the wrong type."""


class InvalidArgumentError(DbFuncError, ValueError):
    """Raised when a caller passes an unusable argument, such as blank command text."""

    argument: Optional[str]

    def __init__(self, message: str, argument: Optional[str] = None) -> None:
        super().__init__(detail=message)
        self.argument = argument


# -- Parameter Errors --
class ParameterError(DbFuncError):
    """Base class for parameter collection errors."""

    name: Optional[str]

    def __init__(self, message: str, name: Optional[str] = None) -> None:
        super().__init__(detail=message)
        self.name = name


class DuplicateParameterError(ParameterError):
    """Raised when a parameter name is added to a collection twice."""


class ParameterNotFoundError(ParameterError, KeyError):
    """Raised when a parameter lookup misses and cannot be synthesized."""


# -- Execution Errors --
class NoResultError(DbFuncError):
    """Raised when a single-table accessor receives a result set without tables."""


class ExecutionError(DbFuncError):
    """Raised when the underlying driver fails while binding or running a command."""

    command_text: Optional[str]

    def __init__(self, message: str, command_text: Optional[str] = None) -> None:
        detail_message = message
        if command_text:
            detail_message = f"{message}\nCommand: {command_text}"
        super().__init__(detail=detail_message)
        self.command_text = command_text


class DatabaseConnectionError(ExecutionError):
    """Raised when a connection to the database cannot be established."""


class QueryTimeoutError(ExecutionError):
    """Raised when a command exceeds its configured timeout."""
