"""Configuration consumed by the command service."""

from dataclasses import dataclass, replace

from dbfunc.core.parameters import DEFAULT_MAX_STRING_SIZE, DEFAULT_TIMEOUT
from dbfunc.exceptions import ImproperConfigurationError

__all__ = ("DEFAULT_SCHEMA_NAME", "UNSET_NAME", "CommandServiceConfig")

DEFAULT_SCHEMA_NAME = "dbo"
UNSET_NAME = "null"


@dataclass(slots=True)
class CommandServiceConfig:
    """Defaults applied while building and logging commands.

    Attributes:
        schema_name: Prefix for stored procedure names that carry no schema.
        default_string_size: Size used for output string parameters when none is given.
        default_timeout: Timeout in seconds given to new parameter collections.
        suppress_logging: Skip the debug messages around each execution.
        environment_name: Environment label included in log messages.
        user_name: User label included in log messages.
    """

    schema_name: str = DEFAULT_SCHEMA_NAME
    default_string_size: int = DEFAULT_MAX_STRING_SIZE
    default_timeout: int = DEFAULT_TIMEOUT
    suppress_logging: bool = False
    environment_name: str = UNSET_NAME
    user_name: str = UNSET_NAME

    def __post_init__(self) -> None:
        if not self.schema_name or not self.schema_name.strip():
            msg = "schema_name must not be empty"
            raise ImproperConfigurationError(msg)
        if self.default_string_size <= 0:
            msg = f"default_string_size must be positive, got {self.default_string_size}"
            raise ImproperConfigurationError(msg)
        if self.default_timeout < 0:
            msg = f"default_timeout must not be negative, got {self.default_timeout}"
            raise ImproperConfigurationError(msg)

    def copy(self) -> "CommandServiceConfig":
        """Return a copy to avoid sharing mutable state."""
        return replace(self)
