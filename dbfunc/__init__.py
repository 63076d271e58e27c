"""dbfunc: run stored procedures and SQL through callback-populated parameters."""

from dbfunc import adapters, core, driver, exceptions, utils
from dbfunc.__metadata__ import __version__
from dbfunc.adapters import DbApiDatabase, SqliteDatabase
from dbfunc.config import CommandServiceConfig
from dbfunc.core.cache import DatabaseCache, get_database_cache
from dbfunc.core.command import BoundCommand, CommandType, DbCommand
from dbfunc.core.parameters import DatabaseParameter, DatabaseParameterCollection, DbType, ParameterDirection
from dbfunc.core.result import ResultSet, ResultTable
from dbfunc.driver import DatabaseAdapterBase, ParametersCallback
from dbfunc.exceptions import (
    DatabaseConnectionError,
    DbFuncError,
    DuplicateParameterError,
    ExecutionError,
    ImproperConfigurationError,
    InvalidArgumentError,
    NoResultError,
    ParameterError,
    ParameterNotFoundError,
    QueryTimeoutError,
)
from dbfunc.service import DatabaseCommandService, get_parameters_description
from dbfunc.utils.text import to_delimited_string

__all__ = (
    "BoundCommand",
    "CommandServiceConfig",
    "CommandType",
    "DatabaseAdapterBase",
    "DatabaseCache",
    "DatabaseCommandService",
    "DatabaseConnectionError",
    "DatabaseParameter",
    "DatabaseParameterCollection",
    "DbApiDatabase",
    "DbCommand",
    "DbFuncError",
    "DbType",
    "DuplicateParameterError",
    "ExecutionError",
    "ImproperConfigurationError",
    "InvalidArgumentError",
    "NoResultError",
    "ParameterDirection",
    "ParameterError",
    "ParameterNotFoundError",
    "ParametersCallback",
    "QueryTimeoutError",
    "ResultSet",
    "ResultTable",
    "SqliteDatabase",
    "__version__",
    "adapters",
    "core",
    "driver",
    "exceptions",
    "get_database_cache",
    "get_parameters_description",
    "to_delimited_string",
    "utils",
)
