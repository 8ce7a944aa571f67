"""Client record persistence.

:func:`open_store` maps a ``DATABASE_URL`` onto a store implementation:

* ``memory://`` - :class:`MemoryClientStore`
* ``sqlite://`` or ``sqlite:///:memory:`` - in-memory SQLite
* ``sqlite:///relative/path.db`` / ``sqlite:////absolute/path.db`` - SQLite file
"""

from __future__ import annotations

from cmxpush.exceptions import CmxConfigError
from cmxpush.storage.base import ClientStore
from cmxpush.storage.memory import MemoryClientStore
from cmxpush.storage.sqlite import SqliteClientStore

_SQLITE_PREFIX = "sqlite://"


def open_store(database_url: str) -> ClientStore:
    """Build the store for *database_url*. The schema is created later by ``initialize()``."""
    url = database_url.strip()
    if url in {"memory://", "memory"}:
        return MemoryClientStore()
    if url.startswith(_SQLITE_PREFIX):
        path = url[len(_SQLITE_PREFIX) :]
        # sqlite:///foo.db -> "/foo.db" -> relative "foo.db"; sqlite:////abs.db -> "/abs.db"
        if path.startswith("/"):
            path = path[1:]
        if not path or path == ":memory:":
            path = ":memory:"
        return SqliteClientStore(path)
    raise CmxConfigError(f"unsupported DATABASE_URL scheme: {database_url!r}")


__all__ = ["ClientStore", "MemoryClientStore", "SqliteClientStore", "open_store"]
