from __future__ import annotations

import logging

from config.settings import settings

_LOGGING_CONFIGURED = False


def configure_logging() -> None:
    """Configure process-wide logging from LOG_LEVEL."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    _LOGGING_CONFIGURED = True
