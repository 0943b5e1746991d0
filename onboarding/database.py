"""SQLAlchemy engine and session handling.

The engine is created on first use from ``settings.DATABASE_URL`` so the URL
can be swapped (for example to in-memory SQLite in tests) with
``configure_engine`` before any session is opened.
"""

from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session
from sqlalchemy.pool import StaticPool

from onboarding import settings


class Base(DeclarativeBase):
    pass


_engine: Engine | None = None


def _create(url: str) -> Engine:
    if url.startswith("sqlite"):
        # one shared connection so in-memory databases survive across sessions
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    return create_engine(url, pool_pre_ping=True)


def configure_engine(url: str) -> Engine:
    """Replace the process-wide engine with one bound to ``url``."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = _create(url)
    return _engine


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = _create(settings.DATABASE_URL)
    return _engine


@contextmanager
def get_session():
    """Yield a SQLAlchemy session bound to the configured engine.

    Objects stay readable after commit; the session is closed on exit.

    Yields:
        Session: Active SQLAlchemy session.
    """
    with Session(get_engine(), expire_on_commit=False) as s:
        yield s


def init_db():
    """Create missing tables."""
    from onboarding import models  # noqa: F401  registers the tables

    Base.metadata.create_all(get_engine())


def ping() -> bool:
    try:
        with get_engine().connect() as conn:
            conn.execute(text("select 1"))
    except Exception:
        return False
    return True
