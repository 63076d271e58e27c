"""SQLite adapter for dbfunc."""

from dbfunc.adapters.sqlite.driver import SqliteDatabase, resolve_database, sqlite_type_coercion_map

__all__ = ("SqliteDatabase", "resolve_database", "sqlite_type_coercion_map")
