"""Logging setup for scripts and adapters.

Engine modules only log at DEBUG through ``logging.getLogger(__name__)``;
configuring handlers is left to the process entry point.
"""

import logging

from invoicing.shared.config import Settings

LOG_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings.

    Args:
        settings: Application settings (log_level is used)
    """
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, force=True)
    logging.getLogger(__name__).debug(f"Logging configured at {settings.log_level}")
