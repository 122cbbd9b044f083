"""Database session and connectivity helpers for the API service.

This module centralizes SQLAlchemy engine/session construction and provides the
FastAPI dependency (`get_db`) used by route handlers.

Design goals:
- single source of truth for DATABASE_URL parsing (`settings.py` / `common.db`)
- short-lived, request-scoped DB sessions
- safe teardown/rollback on errors
"""

from sqlalchemy.orm import sessionmaker

from common.db import make_engine

from .models import Base
from .settings import get_settings

engine = make_engine(get_settings().database_url)
SessionLocal = sessionmaker(bind=engine)


def init_db(bind=None):
    """Create any missing tables for the declarative models.

    Args:
        bind: Engine to use. Defaults to the service engine.
    """
    Base.metadata.create_all(bind=bind or engine)


def get_db():
    """FastAPI dependency that yields a request-scoped SQLAlchemy session.

    Route handlers declare `db: Session = Depends(get_db)` to receive a session
    bound to the API service engine.

    Yields:
        sqlalchemy.orm.Session: An open SQLAlchemy session for the duration of the request.

    Notes:
        - A new session is created per request.
        - Uncommitted work is rolled back if the handler raises.
        - The session is always closed in `finally`.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
