from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest

from cmxpush.config import PushConfig

SECRET = "s1"
VALIDATOR = "v-token-123"
MAC = "aa:bb:cc:dd:ee:ff"


def observation(
    mac: str = MAC,
    epoch: int | None = 1000,
    lat: float = 1.0,
    lng: float = 2.0,
    unc: float = 3.0,
    *,
    with_location: bool = True,
    **extra: Any,
) -> dict[str, Any]:
    obs: dict[str, Any] = {
        "clientMac": mac,
        "seenTime": "1970-01-01T00:16:40Z",
        "seenEpoch": epoch,
        "ipv4": "/123.45.67.89",
        "ipv6": None,
        "rssi": 24,
        "ssid": "Cisco WiFi",
        "manufacturer": "Meraki",
        "os": "Linux",
        "location": {"lat": lat, "lng": lng, "unc": unc} if with_location else None,
    }
    obs.update(extra)
    return obs


def batch(
    *observations: dict[str, Any],
    secret: str = SECRET,
    version: str = "2.0",
    event_type: str = "DevicesSeen",
    floors: list[str] | None = None,
) -> dict[str, Any]:
    return {
        "secret": secret,
        "version": version,
        "type": event_type,
        "data": {
            "apMac": "11:22:33:44:55:66",
            "apFloors": floors,
            "observations": list(observations),
        },
    }


@pytest.fixture
def config() -> PushConfig:
    return PushConfig(secret=SECRET, validator=VALIDATOR)


@pytest.fixture
def make_observation() -> Callable[..., dict[str, Any]]:
    return observation


@pytest.fixture
def make_batch() -> Callable[..., dict[str, Any]]:
    return batch


@pytest.fixture
def encode() -> Callable[[dict[str, Any]], bytes]:
    return lambda payload: json.dumps(payload).encode("utf-8")
