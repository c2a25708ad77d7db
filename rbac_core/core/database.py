"""Database engine and session management."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
from urllib.parse import urlparse

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from rbac_core.core.config import get_settings


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""

    parsed = urlparse(database_url)
    if parsed.scheme != "sqlite" or parsed.path in ("", "/", ":memory:", "/:memory:"):
        return

    # sqlite:///./data/rbac.db parses to "/./data/rbac.db"
    raw_path = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
    Path(raw_path).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Create an engine with the connection options each backend needs."""

    if not database_url.startswith("sqlite"):
        return create_engine(database_url, future=True, echo=echo, pool_pre_ping=True)

    _ensure_sqlite_directory(database_url)
    engine_kwargs: dict[str, object] = {
        "future": True,
        "echo": echo,
        "connect_args": {"check_same_thread": False},
    }
    # In-memory databases live inside a single connection.
    if database_url.endswith(":memory:") or database_url == "sqlite://":
        engine_kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **engine_kwargs)


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=bind, autocommit=False, autoflush=False, future=True, class_=Session)


_settings = get_settings()
engine: Engine = build_engine(_settings.database_url, echo=_settings.sql_echo)
SessionLocal = build_session_factory(engine)


def get_session() -> Iterator[Session]:
    """Yield a request-scoped session that commits on success and rolls back on error."""

    with session_scope() as session:
        yield session


@contextmanager
def session_scope(factory: Optional[sessionmaker[Session]] = None) -> Iterator[Session]:
    """Provide a transactional scope for startup hooks and scripts."""

    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
