"""Entry point for the jsonkv server.

Usage:
    python -m jsonkv

Configuration comes from ``JSONKV_*`` environment variables (or a .env
file), for example::

    JSONKV_PORT=8080 JSONKV_ALLOW_NUKE=true \
    JSONKV_STORE__TYPE=sqlite JSONKV_STORE__OPTIONS='{"db_path": "kv.db"}' \
    python -m jsonkv

Exit codes:
    0: Clean shutdown
    1: Invalid configuration
"""

from __future__ import annotations

import logging
import sys

import uvicorn
from pydantic import ValidationError as SettingsError

from jsonkv.api import create_application
from jsonkv.config import get_settings
from jsonkv.logging_config import setup_logging
from jsonkv.stores import StoreFactoryError

logger = logging.getLogger("jsonkv")


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        settings = get_settings()
    except SettingsError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.log_level)

    try:
        app = create_application(settings)
    except StoreFactoryError as e:
        logger.error("Invalid store configuration: %s", e)
        return 1

    logger.info("jsonkv server listening at http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
