"""Normalized client updates.

The ingestion layer converts each usable observation into a
:class:`ClientUpdate`. Only the reconciler is allowed to merge them into the
store.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReconcileOutcome(StrEnum):
    APPLIED = "applied"
    IGNORED = "ignored"


class ClientUpdate(BaseModel):
    """A candidate replacement for a client's stored state."""

    model_config = ConfigDict(frozen=True)

    device_mac: str = Field(..., description="Client MAC address")
    seen_at_epoch: int = Field(..., description="Observation time (epoch seconds)")
    seen_at_display: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    uncertainty_radius: float | None = None
    manufacturer: str | None = None
    operating_system: str | None = None
    network_name: str | None = None
    floor_labels: str = ""

    @field_validator("device_mac")
    @classmethod
    def _normalize_mac(cls, value: str) -> str:
        mac = value.strip()
        if not mac:
            raise ValueError("device_mac must be non-empty")
        return mac

    def record_fields(self) -> dict[str, Any]:
        """Every mutable :class:`ClientRecord` field, keyed by field name.

        Position, uncertainty, timestamps and metadata always travel
        together; a partial replacement is never produced.
        """
        return self.model_dump(exclude={"device_mac"})
