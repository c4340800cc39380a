"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from federation.core.config import get_settings

Base = declarative_base()


@lru_cache
def get_engine(url: str | None = None):
    url = (url or get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    # store calls run in worker threads
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args)


@lru_cache
def _get_sessionmaker(url: str | None = None):
    return sessionmaker(bind=get_engine(url), autoflush=False, autocommit=False, future=True)


@contextmanager
def get_session(url: str | None = None) -> Session:
    session: Session = _get_sessionmaker(url)()
    try:
        yield session
    finally:
        session.close()


def create_all(url: str | None = None) -> None:
    from . import models  # noqa: F401  # ensure models are imported for metadata

    Base.metadata.create_all(bind=get_engine(url))
