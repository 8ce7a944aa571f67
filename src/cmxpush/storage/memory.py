"""In-process client store."""

from __future__ import annotations

import itertools
import threading

from cmxpush.models.client import ClientRecord


class MemoryClientStore:
    """Dict-backed store; state is lost when the process exits."""

    def __init__(self) -> None:
        self._records: dict[str, ClientRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    async def initialize(self) -> None:
        return None

    async def get(self, mac: str) -> ClientRecord | None:
        return self._records.get(mac)

    async def save_if_newer(self, record: ClientRecord) -> ClientRecord | None:
        with self._lock:
            existing = self._records.get(record.device_mac)
            if existing is None:
                stored = record.model_copy(update={"id": next(self._ids)})
            elif record.seen_at_epoch > existing.seen_at_epoch:
                stored = record.model_copy(update={"id": existing.id})
            else:
                return None
            self._records[record.device_mac] = stored
            return stored

    async def seen_since(self, cutoff_epoch: int) -> list[ClientRecord]:
        records = [r for r in self._records.values() if r.seen_at_epoch > cutoff_epoch]
        return sorted(records, key=lambda r: r.id or 0)

    async def close(self) -> None:
        return None
