"""Text formatting helpers."""

from collections.abc import Iterable
from typing import Optional

__all__ = ("to_delimited_string",)


def to_delimited_string(values: "Optional[Iterable[int]]", delimiter: str = ", ") -> str:
    """Join integer identifiers into a delimited string.

    Useful for passing id lists to procedures that split a delimited
    argument server-side.

    Args:
        values: Integers to join. ``None`` is treated as empty.
        delimiter: Separator placed between values.

    Returns:
        The joined string, or ``""`` when there is nothing to join.
    """
    if values is None:
        return ""
    return delimiter.join(str(int(value)) for value in values)
