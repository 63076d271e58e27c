"""Database handles and the command building and execution mixins."""

from dbfunc.driver._builder import CommandBuilderMixin, ParametersCallback, qualify_procedure_name
from dbfunc.driver._database import DatabaseAdapterBase
from dbfunc.driver._executor import CommandExecutorMixin

__all__ = (
    "CommandBuilderMixin",
    "CommandExecutorMixin",
    "DatabaseAdapterBase",
    "ParametersCallback",
    "qualify_procedure_name",
)
