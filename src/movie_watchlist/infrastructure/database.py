"""SQLite database helpers for the watchlist store."""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from ..config.models import StorageConfig

SQLITE_PREFIX = "sqlite:///"
IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def _ensure_sqlite_path(database_url: str) -> None:
    """Create the parent directory of a SQLite database file."""
    if database_url in IN_MEMORY_URLS or not database_url.startswith(SQLITE_PREFIX):
        return

    path_part = database_url[len(SQLITE_PREFIX) :].split("?")[0]
    if path_part:
        Path(path_part).parent.mkdir(parents=True, exist_ok=True)


def create_engine_from_config(config: StorageConfig) -> Engine:
    """Create an engine for the configured database.

    An in-memory SQLite database is kept on a single shared connection so
    every session sees the same data.

    Raises:
        OSError: If the directory of a SQLite file cannot be created.
    """
    _ensure_sqlite_path(config.database_url)

    kwargs: Dict[str, Any] = {"echo": config.database_echo}
    if config.database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    if config.database_url in IN_MEMORY_URLS:
        kwargs["poolclass"] = StaticPool

    return create_engine(config.database_url, **kwargs)


def init_database(engine: Engine) -> None:
    """Create missing tables."""
    SQLModel.metadata.create_all(engine)


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on any error."""
    session = Session(engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
