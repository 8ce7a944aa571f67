"""Receiver configuration for cmxpush."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from cmxpush._constants import (
    DEFAULT_DATABASE_URL,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEVICES_SEEN,
    RECENT_WINDOW_SECONDS,
    SUPPORTED_VERSION,
)
from cmxpush.exceptions import CmxConfigError


def _env_int(env: Mapping[str, str], key: str) -> int | None:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise CmxConfigError(f"{key} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class PushConfig:
    """Receiver configuration.

    Read once at startup and handed to :class:`cmxpush.endpoint.PushEndpoint`;
    nothing in the request path reads process-global state.

    Parameters
    ----------
    secret : str
        Shared secret configured in the Meraki dashboard. Every push batch
        must carry exactly this value.
    validator : str
        Validation token shown by the dashboard; returned verbatim on
        ``GET /events``.
    host : str
        Bind address.
    port : int
        Bind port.
    database_url : str
        Persistence connection string (``memory://`` or ``sqlite:///...``).
    supported_version : str
        Push API protocol version accepted.
    event_type : str
        Push event type accepted.
    recent_window_seconds : int
        Window used by the bulk "recent clients" query.
    """

    secret: str
    validator: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    database_url: str = DEFAULT_DATABASE_URL
    supported_version: str = SUPPORTED_VERSION
    event_type: str = DEVICES_SEEN
    recent_window_seconds: int = RECENT_WINDOW_SECONDS

    def __post_init__(self) -> None:
        if not self.secret:
            raise CmxConfigError("secret must be non-empty")
        if not self.validator:
            raise CmxConfigError("validator must be non-empty")
        if not 0 < self.port < 65536:
            raise CmxConfigError(f"port out of range: {self.port}")
        if self.recent_window_seconds <= 0:
            raise CmxConfigError("recent_window_seconds must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> PushConfig:
        """Create configuration from environment variables.

        Reads ``CMX_SECRET``, ``CMX_VALIDATOR``, ``CMX_HOST``, ``CMX_PORT``,
        ``CMX_RECENT_WINDOW`` and ``DATABASE_URL``. Explicit keyword
        arguments override environment values; ``None`` overrides are
        ignored so argparse defaults can be passed straight through.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "CMX_SECRET": "secret",
            "CMX_VALIDATOR": "validator",
            "CMX_HOST": "host",
            "DATABASE_URL": "database_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        port = _env_int(env, "CMX_PORT")
        if port is not None:
            config_kwargs["port"] = port

        window = _env_int(env, "CMX_RECENT_WINDOW")
        if window is not None:
            config_kwargs["recent_window_seconds"] = window

        config_kwargs.update({k: v for k, v in overrides.items() if v is not None})

        missing = [name for name in ("secret", "validator") if name not in config_kwargs]
        if missing:
            raise CmxConfigError(f"missing required configuration: {', '.join(missing)}")

        return cls(**config_kwargs)
