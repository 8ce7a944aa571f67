"""Command-line entry point.

Usage::

    DATABASE_URL=sqlite:///clients.db python -m cmxpush [-o ADDR] [-p PORT] SECRET VALIDATOR

Configure the CMX Location Push API in the dashboard with
``http://<host>:<port>/events`` and the same secret, then click
"Validate server".
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from aiohttp import web

from cmxpush.config import PushConfig
from cmxpush.exceptions import CmxConfigError
from cmxpush.server import create_app

_logger = logging.getLogger("cmxpush")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmxpush",
        description="Receive Meraki CMX location pushes and serve the last known position per client.",
    )
    parser.add_argument("-o", "--host", default=None, help="bind address (default 0.0.0.0)")
    parser.add_argument("-p", "--port", type=int, default=None, help="bind port (default 4567)")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("secret", help="shared secret configured in the dashboard")
    parser.add_argument("validator", help="validator token shown by the dashboard")
    return parser


def config_from_args(args: argparse.Namespace) -> PushConfig:
    """Merge command-line values over the environment (``DATABASE_URL`` etc.)."""
    return PushConfig.from_env(
        secret=args.secret,
        validator=args.validator,
        host=args.host,
        port=args.port,
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except CmxConfigError as exc:
        parser.error(str(exc))

    _logger.info("Shared secret configured (%d chars)", len(config.secret))
    _logger.info("VALIDATOR is %s", config.validator)
    _logger.info("Writing database to %s", config.database_url)

    web.run_app(create_app(config), host=config.host, port=config.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
