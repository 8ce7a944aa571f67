"""Observation → client update conversion.

Keeps the "is this sighting worth storing" rule and the field mapping in
one place so the endpoint only iterates and the reconciler only compares.
"""

from __future__ import annotations

from cmxpush.models.observation import Observation
from cmxpush.state.events import ClientUpdate


def is_usable(observation: Observation) -> bool:
    """True when the observation carries a location, a non-zero epoch and a client MAC.

    Probes without a position are routine; they are skipped, not errors.
    """
    if observation.location is None:
        return False
    if not observation.seen_epoch:
        return False
    return bool(observation.client_mac and observation.client_mac.strip())


def build_update(observation: Observation, *, floor_labels: str) -> ClientUpdate:
    """Map a usable observation onto a :class:`ClientUpdate`.

    Callers must check :func:`is_usable` first.
    """
    if not is_usable(observation):
        raise ValueError("observation is missing location, epoch or client MAC")
    location = observation.location
    assert location is not None  # noqa: S101
    assert observation.client_mac is not None  # noqa: S101
    assert observation.seen_epoch is not None  # noqa: S101
    return ClientUpdate(
        device_mac=observation.client_mac,
        seen_at_epoch=observation.seen_epoch,
        seen_at_display=observation.seen_time,
        latitude=location.lat,
        longitude=location.lng,
        uncertainty_radius=location.unc,
        manufacturer=observation.manufacturer,
        operating_system=observation.os,
        network_name=observation.ssid,
        floor_labels=floor_labels,
    )
