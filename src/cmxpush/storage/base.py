"""Client record store interface."""

from __future__ import annotations

from typing import Protocol

from cmxpush.models.client import ClientRecord


class ClientStore(Protocol):
    """Structural interface for client record persistence.

    Implementations must make :meth:`save_if_newer` a single conditional
    write: the record is stored only when no record exists for its MAC or
    the stored ``seen_at_epoch`` is strictly older. That keeps the recency
    invariant even when several writers share the backing storage.
    """

    async def initialize(self) -> None:
        """Create or migrate the schema. Called once before serving."""
        ...

    async def get(self, mac: str) -> ClientRecord | None: ...

    async def save_if_newer(self, record: ClientRecord) -> ClientRecord | None:
        """Persist *record*; return the stored copy, or ``None`` if it was stale."""
        ...

    async def seen_since(self, cutoff_epoch: int) -> list[ClientRecord]:
        """All records with ``seen_at_epoch`` strictly greater than *cutoff_epoch*."""
        ...

    async def close(self) -> None: ...
