"""Custom exception hierarchy for cmxpush."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class CmxError(Exception):
    """Base exception for all cmxpush errors."""


class CmxConfigError(CmxError):
    """Invalid or missing configuration."""


class CmxStorageError(CmxError):
    """The persistence layer failed to read or write client records.

    Raised from the store and deliberately left to propagate: a validated
    observation that could not be written must not be reported as handled.
    """

    def __init__(self, message: str, *, operation: str = "") -> None:
        self.operation = operation
        super().__init__(message)


class RejectReason(StrEnum):
    """Why a whole push batch was dropped."""

    BAD_CONTENT_TYPE = "bad_content_type"
    MALFORMED_PAYLOAD = "malformed_payload"
    BAD_SECRET = "bad_secret"
    UNSUPPORTED_VERSION = "unsupported_version"
    UNSUPPORTED_EVENT_TYPE = "unsupported_event_type"


class BatchRejectedError(CmxError):
    """A push batch failed validation and must be ignored as a whole.

    ``value`` carries the offending field value (content type, secret,
    version, ...) so the rejection can be logged.  The push sender never
    sees this error; the endpoint answers 200 regardless.
    """

    def __init__(self, reason: RejectReason, value: Any = None, message: str = "") -> None:
        self.reason = reason
        self.value = value
        super().__init__(message or f"batch rejected ({reason}): {value!r}")
