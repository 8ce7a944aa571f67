"""Data models for push payloads and stored client state."""

from cmxpush.models._base import CmxBaseModel
from cmxpush.models.client import ClientRecord
from cmxpush.models.observation import DevicesSeenData, Location, Observation, PushEnvelope

__all__ = [
    "ClientRecord",
    "CmxBaseModel",
    "DevicesSeenData",
    "Location",
    "Observation",
    "PushEnvelope",
]
