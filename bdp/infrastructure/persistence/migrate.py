"""Alembic migrations, applied synchronously before the container starts."""

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy.engine import make_url

from bdp.infrastructure.persistence.database import resolve_url

logger = logging.getLogger(__name__)

# Directory holding alembic.ini and migrations/
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def to_sync_url(database_url: str) -> str:
    """Swap the async driver for the backend's default sync driver.

    ``sqlite+aiosqlite:///~/portal.db`` becomes ``sqlite:////home/<user>/portal.db``
    and ``postgresql+asyncpg://...`` becomes ``postgresql://...``.
    """
    url = make_url(database_url)
    if url.database and url.database.startswith("~"):
        url = url.set(database=str(Path(url.database).expanduser()))
    return url.set(drivername=url.get_backend_name()).render_as_string(hide_password=False)


def get_alembic_config(database_url: str) -> AlembicConfig:
    config = AlembicConfig(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    # configparser interpolation treats % specially
    config.set_main_option("sqlalchemy.url", to_sync_url(database_url).replace("%", "%%"))
    return config


def run_migrations(database_url: str) -> None:
    """Upgrade the database to the latest revision."""
    # Creates the parent directory of a SQLite file
    resolve_url(database_url)
    command.upgrade(get_alembic_config(database_url), "head")
    logger.info("Database migrations complete: %s", make_url(database_url).get_backend_name())
