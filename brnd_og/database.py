from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

from .config import settings


class Base(DeclarativeBase):
    pass


# No connection is opened until the first query is executed.
engine = create_engine(
    settings.sqlalchemy_url(),
    echo=settings.log_sql,
    future=True,
    pool_pre_ping=not settings.sqlalchemy_url().startswith("sqlite"),
    connect_args=settings.connect_args(),
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@contextmanager
def db_session():
    """Context-manager style session with automatic commit/rollback."""
    session: Session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
