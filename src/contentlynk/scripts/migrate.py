# src/contentlynk/scripts/migrate.py
"""Apply or roll back database migrations against the configured database."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from contentlynk.core.log_config import configure_logging
from contentlynk.core.settings import settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def alembic_config() -> Config:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    # Script location relative to the project root
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", settings.database_url_sync)
    return cfg


def run_upgrade(revision: str = "head") -> None:
    logger.info("Upgrading database to %s", revision)
    command.upgrade(alembic_config(), revision)


def run_downgrade(revision: str) -> None:
    logger.info("Downgrading database to %s", revision)
    command.downgrade(alembic_config(), revision)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("action", choices=("upgrade", "downgrade"), nargs="?", default="upgrade")
    parser.add_argument("revision", nargs="?", default=None)
    args = parser.parse_args(argv)

    configure_logging()
    if args.action == "upgrade":
        run_upgrade(args.revision or "head")
    else:
        run_downgrade(args.revision or "-1")


if __name__ == "__main__":
    main()
