"""Stored per-client state."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ClientRecord(BaseModel):
    """Last known good position and metadata for one client MAC.

    Field aliases are the JSON keys served by ``/clients``; the frontend
    reads these names.

    Parameters
    ----------
    id : int or None
        Surrogate key assigned by the store on first insert. ``None`` for a
        record that was never persisted.
    device_mac : str
        Client MAC address; the lookup key.
    seen_at_epoch : int
        Epoch seconds of the most recent accepted observation.
    seen_at_display : str or None
        The observation's ``seenTime`` as received.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int | None = None
    device_mac: str = Field(..., alias="mac")
    seen_at_epoch: int = Field(default=0, alias="seenEpoch")
    seen_at_display: str | None = Field(default=None, alias="seenString")
    latitude: float | None = Field(default=None, alias="lat")
    longitude: float | None = Field(default=None, alias="lng")
    uncertainty_radius: float | None = Field(default=None, alias="unc")
    manufacturer: str | None = None
    operating_system: str | None = Field(default=None, alias="os")
    network_name: str | None = Field(default=None, alias="ssid")
    floor_labels: str = Field(default="", alias="floors")

    @classmethod
    def baseline(cls, mac: str) -> ClientRecord:
        """An unsaved record that any usable observation supersedes."""
        return cls(device_mac=mac, seen_at_epoch=0)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
