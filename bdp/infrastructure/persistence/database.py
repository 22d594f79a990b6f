"""Async engine and session factory for the portal database."""

from pathlib import Path
from typing import Any

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from bdp.config import DatabaseConfig


def _is_sqlite(url: URL) -> bool:
    return url.get_backend_name() == "sqlite"


def _is_memory(url: URL) -> bool:
    return url.database in (None, "", ":memory:")


def resolve_url(raw: str) -> URL:
    """Parse a database URL, expanding ``~`` in file-backed SQLite paths.

    The parent directory of a SQLite file is created when missing.
    """
    url = make_url(raw)
    if not _is_sqlite(url) or _is_memory(url):
        return url

    path = Path(url.database).expanduser().resolve()  # type: ignore[arg-type]
    path.parent.mkdir(parents=True, exist_ok=True)
    return url.set(database=str(path))


def _engine_options(url: URL, echo: bool) -> dict[str, Any]:
    if _is_sqlite(url):
        # One shared connection, so in-memory databases survive across sessions
        return {
            "echo": echo,
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "echo": echo,
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
    }


def create_db_engine(config: DatabaseConfig) -> AsyncEngine:
    url = resolve_url(config.url)
    return create_async_engine(url, **_engine_options(url, config.echo))


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions keep loaded rows usable after commit; flushing is explicit."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
