"""Database session management utilities."""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from backend.models.base import Base
from backend.utils.config import get_settings

settings = get_settings()


def build_engine(url: str, **kwargs) -> Engine:
    """Create an engine, allowing SQLite connections to cross threads."""

    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, future=True, echo=False, **kwargs)


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create any missing tables."""

    from backend.models import snapshot  # noqa: F401

    Base.metadata.create_all(bind=bind or engine, checkfirst=True)


@contextmanager
def get_session(factory: Optional[sessionmaker] = None) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session: Session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
