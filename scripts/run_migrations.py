#!/usr/bin/env python3
"""Apply Alembic migrations to the configured database.

Usage:
    python scripts/run_migrations.py            # upgrade to head
    python scripts/run_migrations.py 3f1c2a9d7b64
    python scripts/run_migrations.py --downgrade base
"""

import argparse
import sys

import logfire
from alembic import command
from alembic.config import Config

from bizops.config import Settings
from bizops.util.logging import redact_url
from bizops.util.observability import configure_logfire


def main() -> int:
    """Run migrations and log any errors to Logfire."""
    parser = argparse.ArgumentParser(description="Migrate the Bizops database")
    parser.add_argument("revision", nargs="?", default="head", help="Target revision")
    parser.add_argument(
        "--downgrade", action="store_true", help="Downgrade to the target instead"
    )
    args = parser.parse_args()

    settings = Settings()
    configure_logfire(settings)

    direction = "downgrade" if args.downgrade else "upgrade"
    with logfire.span(
        "run_migrations",
        direction=direction,
        revision=args.revision,
        database=redact_url(settings.database_url),
    ):
        try:
            alembic_cfg = Config("alembic.ini")
            # The URL always comes from settings; configparser needs % escaped
            alembic_cfg.set_main_option(
                "sqlalchemy.url", settings.database_url.replace("%", "%%")
            )

            if args.downgrade:
                command.downgrade(alembic_cfg, args.revision)
            else:
                command.upgrade(alembic_cfg, args.revision)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # Re-raise so the deploy fails instead of starting on a broken schema
            raise

    logfire.info("Database migrations completed", direction=direction)
    return 0


if __name__ == "__main__":
    sys.exit(main())
