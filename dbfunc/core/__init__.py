"""Core data model: parameters, commands, results and the handle cache."""

from dbfunc.core.cache import DatabaseCache, get_database_cache
from dbfunc.core.command import BoundCommand, CommandParameter, CommandType, DbCommand
from dbfunc.core.parameters import (
    DEFAULT_MAX_STRING_SIZE,
    DEFAULT_TIMEOUT,
    RETURN_VALUE,
    DatabaseParameter,
    DatabaseParameterCollection,
    DbType,
    ParameterDirection,
    normalize_parameter_name,
)
from dbfunc.core.result import ResultSet, ResultTable

__all__ = (
    "DEFAULT_MAX_STRING_SIZE",
    "DEFAULT_TIMEOUT",
    "RETURN_VALUE",
    "BoundCommand",
    "CommandParameter",
    "CommandType",
    "DatabaseCache",
    "DatabaseParameter",
    "DatabaseParameterCollection",
    "DbCommand",
    "DbType",
    "ParameterDirection",
    "ResultSet",
    "ResultTable",
    "get_database_cache",
    "normalize_parameter_name",
)
