"""Command-line entrypoint that serves the bridge with uvicorn."""

import logging
import sys

import uvicorn

from nfc_bridge.api.app import create_app
from nfc_bridge.app_logging import configure_logging
from nfc_bridge.config import Settings
from nfc_bridge.containers import build_container
from nfc_bridge.domain.errors import ConfigurationError


def main() -> None:
    """Load configuration and run the HTTP server; exit 1 if it is invalid."""
    settings = Settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger(__name__)
    try:
        container = build_container(settings)
    except ConfigurationError:
        logger.exception("Error reading settings file")
        sys.exit(1)
    logger.info("Server is running on port %s", settings.port)
    logger.info(
        "Triggers can be accessed at http://<your-server-ip>:%s/<trigger>",
        settings.port,
    )
    uvicorn.run(create_app(container), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
