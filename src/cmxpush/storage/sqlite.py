"""SQLite client store.

Uses Python's built-in sqlite3 with asyncio.to_thread() so the event loop
never blocks on disk I/O. One connection is shared by all worker threads
and guarded by a lock.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from cmxpush.exceptions import CmxStorageError
from cmxpush.models.client import ClientRecord

_logger = logging.getLogger(__name__)

T = TypeVar("T")

SCHEMA_VERSION = 1

CREATE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS clients (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    mac          TEXT NOT NULL UNIQUE,
    seen_string  TEXT,
    seen_epoch   INTEGER NOT NULL DEFAULT 0,
    lat          REAL,
    lng          REAL,
    unc          REAL,
    manufacturer TEXT,
    os           TEXT,
    ssid         TEXT,
    floors       TEXT NOT NULL DEFAULT ''
);

CREATE INDEX IF NOT EXISTS idx_clients_seen_epoch ON clients(seen_epoch);

CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);
"""

# The WHERE clause on DO UPDATE makes the write a compare-and-swap on seen_epoch.
_UPSERT_SQL = """
INSERT INTO clients (mac, seen_string, seen_epoch, lat, lng, unc, manufacturer, os, ssid, floors)
VALUES (:mac, :seen_string, :seen_epoch, :lat, :lng, :unc, :manufacturer, :os, :ssid, :floors)
ON CONFLICT(mac) DO UPDATE SET
    seen_string = excluded.seen_string,
    seen_epoch = excluded.seen_epoch,
    lat = excluded.lat,
    lng = excluded.lng,
    unc = excluded.unc,
    manufacturer = excluded.manufacturer,
    os = excluded.os,
    ssid = excluded.ssid,
    floors = excluded.floors
WHERE excluded.seen_epoch > clients.seen_epoch
"""

_SELECT_COLUMNS = "id, mac, seen_string, seen_epoch, lat, lng, unc, manufacturer, os, ssid, floors"


def _row_to_record(row: sqlite3.Row) -> ClientRecord:
    return ClientRecord(
        id=row["id"],
        device_mac=row["mac"],
        seen_at_epoch=row["seen_epoch"],
        seen_at_display=row["seen_string"],
        latitude=row["lat"],
        longitude=row["lng"],
        uncertainty_radius=row["unc"],
        manufacturer=row["manufacturer"],
        operating_system=row["os"],
        network_name=row["ssid"],
        floor_labels=row["floors"] or "",
    )


def _record_params(record: ClientRecord) -> dict[str, Any]:
    return {
        "mac": record.device_mac,
        "seen_string": record.seen_at_display,
        "seen_epoch": record.seen_at_epoch,
        "lat": record.latitude,
        "lng": record.longitude,
        "unc": record.uncertainty_radius,
        "manufacturer": record.manufacturer,
        "os": record.operating_system,
        "ssid": record.network_name,
        "floors": record.floor_labels,
    }


class SqliteClientStore:
    """Client store backed by a SQLite database file (or ``:memory:``)."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            if self.db_path != ":memory:":
                conn.execute("PRAGMA journal_mode=WAL")
            self._conn = conn
        return self._conn

    async def _run(self, operation: str, fn: Callable[[sqlite3.Connection], T]) -> T:
        def _locked() -> T:
            with self._lock:
                return fn(self._connection())

        try:
            return await asyncio.to_thread(_locked)
        except (sqlite3.Error, OverflowError) as exc:
            raise CmxStorageError(f"SQLite {operation} failed: {exc}", operation=operation) from exc

    async def initialize(self) -> None:
        def _init_db(conn: sqlite3.Connection) -> None:
            with conn:
                conn.executescript(CREATE_SCHEMA_SQL)
                row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
                current_version = row[0] or 0
                if current_version < SCHEMA_VERSION:
                    conn.execute("INSERT OR REPLACE INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
                    _logger.info("Migration v%d → v%d: created clients table", current_version, SCHEMA_VERSION)

        await self._run("initialize", _init_db)
        _logger.info("SQLite client store ready at %s", self.db_path)

    async def get(self, mac: str) -> ClientRecord | None:
        def _get(conn: sqlite3.Connection) -> ClientRecord | None:
            row = conn.execute(f"SELECT {_SELECT_COLUMNS} FROM clients WHERE mac = ?", (mac,)).fetchone()
            return _row_to_record(row) if row is not None else None

        return await self._run("get", _get)

    async def save_if_newer(self, record: ClientRecord) -> ClientRecord | None:
        def _save(conn: sqlite3.Connection) -> ClientRecord | None:
            with conn:
                conn.execute(_UPSERT_SQL, _record_params(record))
                changed = conn.execute("SELECT changes()").fetchone()[0]
                if not changed:
                    return None
                row = conn.execute(
                    f"SELECT {_SELECT_COLUMNS} FROM clients WHERE mac = ?",
                    (record.device_mac,),
                ).fetchone()
            return _row_to_record(row)

        return await self._run("save", _save)

    async def seen_since(self, cutoff_epoch: int) -> list[ClientRecord]:
        def _query(conn: sqlite3.Connection) -> list[ClientRecord]:
            rows = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM clients WHERE seen_epoch > ? ORDER BY id",
                (cutoff_epoch,),
            ).fetchall()
            return [_row_to_record(row) for row in rows]

        return await self._run("query", _query)

    async def close(self) -> None:
        def _close() -> None:
            with self._lock:
                if self._conn is not None:
                    self._conn.close()
                    self._conn = None

        await asyncio.to_thread(_close)
