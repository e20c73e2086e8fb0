"""Logging setup for the API process."""

from __future__ import annotations

import logging

from contentlynk.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger from ``LOG_LEVEL`` unless already configured."""
    resolved = (level or settings.log_level).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("contentlynk").setLevel(resolved)
