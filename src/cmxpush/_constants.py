"""Internal constants shared across the package."""

#: Protocol version of the CMX Location Push API this receiver understands.
SUPPORTED_VERSION = "2.0"

#: The only push event type that carries client observations.
DEVICES_SEEN = "DevicesSeen"

JSON_CONTENT_TYPE = "application/json"

#: Clients seen within this many seconds count as "currently present".
RECENT_WINDOW_SECONDS = 300

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 4567
DEFAULT_DATABASE_URL = "memory://"
