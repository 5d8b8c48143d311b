#!/usr/bin/env python3
"""Apply schema migrations before the API starts.

The email-uniqueness migration aborts when duplicate emails exist; the
failure is reported to Logfire and the process exits non-zero so the
deployment stops.
"""

import sys
from pathlib import Path

import logfire
from alembic import command
from alembic.config import Config

from warden.config import Settings
from warden.util.logging import setup_logging
from warden.util.observability import configure_logfire

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def main() -> int:
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    alembic_cfg = Config(str(ALEMBIC_INI))
    alembic_cfg.set_main_option("script_location", str(ALEMBIC_INI.parent / "migrations"))

    with logfire.span("migrations.upgrade", environment=settings.environment):
        try:
            command.upgrade(alembic_cfg, "head")
        except Exception as e:
            logfire.error(
                "Database migration failed",
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # Never start on a half-migrated schema
            raise

    logfire.info("Database migrations completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
