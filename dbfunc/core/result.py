"""Tabular results returned by data-set executions."""

from collections.abc import Iterator, Sequence
from typing import Any, Optional

from mypy_extensions import mypyc_attr

__all__ = ("ResultSet", "ResultTable")


@mypyc_attr(allow_interpreted_subclasses=True)
class ResultTable:
    """One table of rows produced by a command.

    Args:
        name: Table name; empty until assigned.
        column_names: Column names in cursor order.
        rows: Rows as dictionaries keyed by column name.
    """

    __slots__ = ("column_names", "name", "rows")

    def __init__(
        self, name: str = "", column_names: "Optional[list[str]]" = None, rows: "Optional[list[dict[str, Any]]]" = None
    ) -> None:
        self.name = name
        self.column_names = column_names or []
        self.rows = rows or []

    @classmethod
    def from_cursor_rows(cls, description: "Optional[Sequence[Any]]", rows: "Sequence[Sequence[Any]]") -> "ResultTable":
        """Build a table from a DB-API cursor description and fetched rows."""
        column_names = [column[0] for column in description or ()]
        return cls(column_names=column_names, rows=[dict(zip(column_names, row)) for row in rows])

    def get_first(self) -> "Optional[dict[str, Any]]":
        return self.rows[0] if self.rows else None

    def __iter__(self) -> "Iterator[dict[str, Any]]":
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index: int) -> "dict[str, Any]":
        return self.rows[index]

    def __repr__(self) -> str:
        return f"ResultTable(name={self.name!r}, columns={self.column_names!r}, rows={len(self.rows)})"


@mypyc_attr(allow_interpreted_subclasses=True)
class ResultSet:
    """Ordered tables produced by one command."""

    __slots__ = ("tables",)

    def __init__(self, tables: "Optional[list[ResultTable]]" = None) -> None:
        self.tables = tables or []

    def first(self) -> "Optional[ResultTable]":
        return self.tables[0] if self.tables else None

    def __iter__(self) -> Iterator[ResultTable]:
        return iter(self.tables)

    def __len__(self) -> int:
        return len(self.tables)

    def __getitem__(self, index: int) -> ResultTable:
        return self.tables[index]

    def __repr__(self) -> str:
        return f"ResultSet(tables={len(self.tables)})"
