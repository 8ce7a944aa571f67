"""Recency reconciler.

This is the only component allowed to write client records.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from cmxpush.models.client import ClientRecord
from cmxpush.state.events import ClientUpdate, ReconcileOutcome
from cmxpush.state.policy import should_accept_update
from cmxpush.storage.base import ClientStore

_logger = logging.getLogger(__name__)


class _KeyedLock:
    """One ``asyncio.Lock`` per key, dropped again once nobody holds or awaits it."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @contextlib.asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class Reconciler:
    """Applies client updates to a store, never moving a record back in time.

    Lookup, comparison and write for one MAC run under that MAC's lock, so
    concurrent batches reporting the same client cannot lose the newer
    update. Different MACs never wait on each other.
    """

    def __init__(self, store: ClientStore) -> None:
        self._store = store
        self._locks = _KeyedLock()

    async def reconcile(self, update: ClientUpdate) -> ReconcileOutcome:
        mac = update.device_mac
        async with self._locks.hold(mac):
            current = await self._store.get(mac)
            if current is None:
                current = ClientRecord.baseline(mac)

            if not should_accept_update(current_epoch=current.seen_at_epoch, incoming_epoch=update.seen_at_epoch):
                _logger.debug(
                    "Ignoring stale observation for %s (epoch %d <= %d)",
                    mac,
                    update.seen_at_epoch,
                    current.seen_at_epoch,
                )
                return ReconcileOutcome.IGNORED

            candidate = current.model_copy(update=update.record_fields())
            stored = await self._store.save_if_newer(candidate)

        if stored is None:
            # Another writer sharing the backing storage got there first.
            _logger.debug("Store declined update for %s at epoch %d", mac, update.seen_at_epoch)
            return ReconcileOutcome.IGNORED
        return ReconcileOutcome.APPLIED
