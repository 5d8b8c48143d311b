"""Standard library logging for the processes around the API.

Application code logs through logfire. This only settles the loggers of
the libraries that log through ``logging`` (uvicorn, alembic, SQLAlchemy,
httpx) so scripts and the server print one consistent format.
"""

import logging
import sys

from warden.config import Settings

# Chatty below WARNING unless debugging
_QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "sqlalchemy.pool")

# Follow the application level
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "alembic")


def setup_logging(settings: Settings) -> None:
    """Configure process-wide logging.

    Args:
        settings: Application settings
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    for name in _SERVER_LOGGERS:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(level)

    quiet_level = logging.DEBUG if settings.debug else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    logging.getLogger("warden").setLevel(level)

    logging.getLogger(__name__).info(
        "Logging configured: environment=%s, level=%s",
        settings.environment,
        logging.getLevelName(level),
    )
