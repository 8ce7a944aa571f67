"""Batch validation.

Checks run in a fixed order and stop at the first failure:
content type, JSON body, shared secret, protocol version, event type and
finally the shape of ``data``.
"""

from __future__ import annotations

import json
import secrets
from typing import Any

from pydantic import ValidationError

from cmxpush._constants import JSON_CONTENT_TYPE
from cmxpush.config import PushConfig
from cmxpush.exceptions import BatchRejectedError, RejectReason
from cmxpush.models.observation import PushEnvelope


def _secret_matches(candidate: Any, expected: str) -> bool:
    if not isinstance(candidate, str):
        return False
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def parse_body(body: bytes | str) -> dict[str, Any]:
    """Decode a request body into a JSON object or reject the batch."""
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise BatchRejectedError(RejectReason.MALFORMED_PAYLOAD, str(exc)) from exc
    if not isinstance(payload, dict):
        raise BatchRejectedError(RejectReason.MALFORMED_PAYLOAD, type(payload).__name__)
    return payload


def validate_batch(content_type: str | None, body: bytes | str, config: PushConfig) -> PushEnvelope:
    """Validate one push request and return the parsed envelope; its ``data`` holds the batch.

    Raises
    ------
    BatchRejectedError
        With the first failing check as ``reason`` and the offending value.
    """
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type != JSON_CONTENT_TYPE:
        raise BatchRejectedError(RejectReason.BAD_CONTENT_TYPE, content_type)

    payload = parse_body(body)

    secret = payload.get("secret")
    if not _secret_matches(secret, config.secret):
        raise BatchRejectedError(RejectReason.BAD_SECRET, secret)

    version = payload.get("version")
    if version != config.supported_version:
        raise BatchRejectedError(RejectReason.UNSUPPORTED_VERSION, version)

    event_type = payload.get("type")
    if event_type != config.event_type:
        raise BatchRejectedError(RejectReason.UNSUPPORTED_EVENT_TYPE, event_type)

    try:
        envelope = PushEnvelope.model_validate(payload)
    except ValidationError as exc:
        raise BatchRejectedError(
            RejectReason.MALFORMED_PAYLOAD,
            f"{exc.error_count()} invalid field(s) in data",
        ) from exc
    return envelope
