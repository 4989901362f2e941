from contextlib import contextmanager

from fastapi import HTTPException, status
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.logging import setup_logger

logger = setup_logger(__name__)


def build_engine(database_url: str):
    """Create an engine; SQLite needs thread sharing for FastAPI's threadpool."""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@contextmanager
def transaction(db: Session, failure_detail: str):
    """
    Transaction boundary for one admin operation.

    Everything written inside the block (the edit itself, re-derived points,
    every affected player's statistics and the audit entry) commits together
    or not at all. Database errors are rolled back, logged and reported as
    HTTP 500 with `failure_detail`; any other exception is rolled back and
    re-raised unchanged.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{failure_detail}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure_detail)
    except Exception:
        db.rollback()
        raise
