"""Push endpoint operations, independent of the HTTP framework."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from cmxpush._redact import redact_for_log
from cmxpush.config import PushConfig
from cmxpush.exceptions import BatchRejectedError, RejectReason
from cmxpush.ingestion.apply import build_update, is_usable
from cmxpush.ingestion.normalize import join_floor_labels
from cmxpush.ingestion.validate import validate_batch
from cmxpush.state.events import ReconcileOutcome
from cmxpush.state.policy import recent_cutoff
from cmxpush.state.reconciler import Reconciler
from cmxpush.storage.base import ClientStore

_logger = logging.getLogger(__name__)

_REJECTION_MESSAGES: dict[RejectReason, str] = {
    RejectReason.BAD_CONTENT_TYPE: "got post with unexpected content type: %r",
    RejectReason.MALFORMED_PAYLOAD: "got post with malformed payload: %s",
    RejectReason.BAD_SECRET: "got post with bad secret: %r",
    RejectReason.UNSUPPORTED_VERSION: "got post with unexpected version: %r",
    RejectReason.UNSUPPORTED_EVENT_TYPE: "got post for event that we're not interested in: %r",
}


@dataclass(slots=True)
class IngestSummary:
    """What happened to one push batch."""

    rejected: RejectReason | None = None
    applied: int = 0
    ignored: int = 0
    skipped: int = 0

    @property
    def accepted(self) -> bool:
        return self.rejected is None


class PushEndpoint:
    """Validation handshake, batch ingestion and client lookups.

    Usage::

        endpoint = PushEndpoint(config, store)
        await endpoint.ingest("application/json", body)
        record = await endpoint.lookup("aa:bb:cc:dd:ee:ff")
    """

    def __init__(
        self,
        config: PushConfig,
        store: ClientStore,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._store = store
        self._reconciler = Reconciler(store)
        self._clock = clock

    @property
    def config(self) -> PushConfig:
        return self._config

    @property
    def store(self) -> ClientStore:
        return self._store

    def validator_token(self) -> str:
        return self._config.validator

    async def ingest(self, content_type: str | None, body: bytes | str) -> IngestSummary:
        """Process one push batch.

        Rejected batches are logged and otherwise dropped. Storage failures
        propagate to the caller.
        """
        try:
            envelope = validate_batch(content_type, body, self._config)
        except BatchRejectedError as exc:
            _logger.warning(_REJECTION_MESSAGES[exc.reason], exc.value)
            return IngestSummary(rejected=exc.reason)

        data = envelope.data
        summary = IngestSummary()
        floors = join_floor_labels(data.ap_floors)
        _logger.debug(
            "Batch from AP %s with %d observation(s): %s",
            data.ap_mac,
            len(data.observations),
            redact_for_log(envelope.raw),
        )

        for observation in data.observations:
            if not is_usable(observation):
                summary.skipped += 1
                _logger.debug("Skipping unusable observation for %s", observation.client_mac)
                continue

            _logger.info("AP %s on %s: %s", data.ap_mac, data.ap_floors, observation.raw)
            outcome = await self._reconciler.reconcile(build_update(observation, floor_labels=floors))
            if outcome is ReconcileOutcome.APPLIED:
                summary.applied += 1
            else:
                summary.ignored += 1

        _logger.debug(
            "Batch from AP %s: %d applied, %d ignored, %d skipped",
            data.ap_mac,
            summary.applied,
            summary.ignored,
            summary.skipped,
        )
        return summary

    async def lookup(self, mac: str) -> dict[str, Any]:
        """The client's record as a wire dict, or ``{}`` when unknown."""
        record = await self._store.get(mac)
        _logger.info("Retrieved client %s: %s", mac, "found" if record is not None else "not found")
        return record.to_wire() if record is not None else {}

    async def recent(self) -> list[dict[str, Any]]:
        """Every client seen within the recency window."""
        cutoff = recent_cutoff(self._clock(), self._config.recent_window_seconds)
        records = await self._store.seen_since(cutoff)
        return [record.to_wire() for record in records]
