"""Inbound ``DevicesSeen`` push models."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from cmxpush.ingestion.normalize import safe_float, safe_int, safe_str, strip_ip_prefix
from cmxpush.models._base import CmxBaseModel


class Location(CmxBaseModel):
    """Position estimate for a client.

    Parameters
    ----------
    lat : float or None
        Latitude in degrees.
    lng : float or None
        Longitude in degrees.
    unc : float or None
        Uncertainty radius in meters.
    """

    lat: float | None = None
    lng: float | None = None
    unc: float | None = None

    @field_validator("lat", "lng", "unc", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)


class Observation(CmxBaseModel):
    """One sighting of a client by an access point."""

    client_mac: str | None = None
    seen_time: str | None = None
    seen_epoch: int | None = None
    ipv4: str | None = None
    ipv6: str | None = None
    rssi: int | None = None
    ssid: str | None = None
    manufacturer: str | None = None
    os: str | None = None
    location: Location | None = None

    @field_validator("seen_epoch", "rssi", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("client_mac", "seen_time", "ssid", "manufacturer", "os", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("ipv4", "ipv6", mode="before")
    @classmethod
    def _coerce_ips(cls, value: Any) -> str | None:
        return strip_ip_prefix(value)

    @field_validator("location", mode="before")
    @classmethod
    def _coerce_location(cls, value: Any) -> Any:
        # A location that is not an object makes this observation unusable, not the batch.
        return value if isinstance(value, dict) else None


class DevicesSeenData(CmxBaseModel):
    """The ``data`` object of a ``DevicesSeen`` batch."""

    ap_mac: str | None = None
    ap_floors: list[str] | str | None = None
    observations: list[Observation] = []

    @field_validator("ap_floors", mode="before")
    @classmethod
    def _coerce_floors(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [str(label) for label in value if label is not None]
        return value

    @field_validator("observations", mode="before")
    @classmethod
    def _coerce_observations(cls, value: Any) -> Any:
        # Non-object entries become empty observations, which are skipped as unusable.
        if isinstance(value, list):
            return [item if isinstance(item, dict) else {} for item in value]
        return value


class PushEnvelope(CmxBaseModel):
    """A complete push request body."""

    secret: str
    version: str
    type: str
    data: DevicesSeenData
