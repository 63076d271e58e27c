from dbfunc.adapters.dbapi import DbApiDatabase
from dbfunc.adapters.sqlite import SqliteDatabase

__all__ = ("DbApiDatabase", "SqliteDatabase")
