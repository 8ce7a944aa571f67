"""cmxpush - Meraki CMX Location Push receiver keeping the latest position per client."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cmxpush")
except PackageNotFoundError:
    __version__ = "0+local"
from cmxpush.config import PushConfig
from cmxpush.endpoint import IngestSummary, PushEndpoint
from cmxpush.exceptions import (
    BatchRejectedError,
    CmxConfigError,
    CmxError,
    CmxStorageError,
    RejectReason,
)
from cmxpush.models import ClientRecord, DevicesSeenData, Location, Observation, PushEnvelope
from cmxpush.server import create_app
from cmxpush.state.events import ClientUpdate, ReconcileOutcome
from cmxpush.state.reconciler import Reconciler
from cmxpush.storage import ClientStore, MemoryClientStore, SqliteClientStore, open_store

__all__ = [
    "__version__",
    "BatchRejectedError",
    "ClientRecord",
    "ClientStore",
    "ClientUpdate",
    "CmxConfigError",
    "CmxError",
    "CmxStorageError",
    "DevicesSeenData",
    "IngestSummary",
    "Location",
    "MemoryClientStore",
    "Observation",
    "PushConfig",
    "PushEndpoint",
    "PushEnvelope",
    "Reconciler",
    "ReconcileOutcome",
    "RejectReason",
    "SqliteClientStore",
    "create_app",
    "open_store",
]
