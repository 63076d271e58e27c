"""Process-wide cache of database handles keyed by connection string.

Entries are created lazily and never replaced or evicted. Reads of an existing
entry take no lock; creation of a new entry is serialized per connection
string so that the factory runs once per key while other keys proceed.
"""

import threading
from typing import TYPE_CHECKING, Generic, Optional

from mypy_extensions import mypyc_attr
from typing_extensions import TypeVar

from dbfunc.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ("DatabaseCache", "get_database_cache")

HandleT = TypeVar("HandleT")

logger = get_logger("core.cache")


@mypyc_attr(allow_interpreted_subclasses=False)
class DatabaseCache(Generic[HandleT]):
    """Append-only, thread-safe map of connection string to handle."""

    __slots__ = ("_entries", "_key_locks", "_lock")

    def __init__(self) -> None:
        self._entries: dict[str, HandleT] = {}
        self._key_locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def _lock_for(self, connection_string: str) -> threading.Lock:
        with self._lock:
            key_lock = self._key_locks.get(connection_string)
            if key_lock is None:
                key_lock = self._key_locks[connection_string] = threading.Lock()
            return key_lock

    def get(self, connection_string: str) -> "Optional[HandleT]":
        return self._entries.get(connection_string)

    def get_or_create(self, connection_string: str, factory: "Callable[[str], HandleT]") -> HandleT:
        """Return the cached handle, creating it with ``factory`` on first use.

        Args:
            connection_string: Cache key.
            factory: Called with ``connection_string`` when no handle exists yet.

        Returns:
            The one handle held for ``connection_string``.
        """
        handle = self._entries.get(connection_string)
        if handle is not None:
            return handle

        with self._lock_for(connection_string):
            handle = self._entries.get(connection_string)
            if handle is not None:
                return handle
            handle = factory(connection_string)
            self._entries[connection_string] = handle
            logger.debug("Created database handle %s", type(handle).__name__)
            return handle

    def __contains__(self, connection_string: object) -> bool:
        return connection_string in self._entries

    def __len__(self) -> int:
        return len(self._entries)


_database_cache: "Optional[DatabaseCache]" = None  # pyright: ignore[reportMissingTypeArgument]
_cache_lock = threading.Lock()


def get_database_cache() -> "DatabaseCache":  # pyright: ignore[reportMissingTypeArgument]
    """Get the process-wide database handle cache.

    Returns:
        Singleton cache instance
    """
    global _database_cache
    if _database_cache is None:
        with _cache_lock:
            if _database_cache is None:
                _database_cache = DatabaseCache()
    return _database_cache
