# app/database.py
import logging
from contextlib import contextmanager

from sqlalchemy import exc as sa_exc
from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings
from app.core.errors import TransientError

settings = get_settings()
logger = logging.getLogger(__name__)

# ---------------------------------------------------------
# Postgres connection (via pooler)
#
# - sslmode=require   : enforce SSL when running in the cloud
# - pool_size         : keep the pool small, poolers limit client count
# - pool_timeout      : deadline for checking out a connection; expiry
#                       surfaces as TransientError
# - pool_pre_ping=True: validate connections before using them
#
# SQLite (local runs / tests) takes none of the pool arguments.
# ---------------------------------------------------------


def _build_url(raw_url: str) -> str:
    """Append sslmode=require to Postgres URLs that don't set it."""
    if not settings.DB_REQUIRE_SSL or not raw_url.startswith("postgres"):
        return raw_url
    if "sslmode=" in raw_url:
        return raw_url
    if "?" in raw_url:
        return raw_url + "&sslmode=require"
    return raw_url + "?sslmode=require"


db_url = _build_url(settings.DATABASE_URL)

if db_url.startswith("sqlite"):
    engine = create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        db_url,
        echo=False,        # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
    )


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session


@contextmanager
def store_errors(session: Session, operation: str):
    """
    Translate connection-level database failures into TransientError.

    Integrity errors are left alone: they are domain conflicts, not
    infrastructure failures, and callers handle them explicitly.
    """
    try:
        yield
    except (sa_exc.OperationalError, sa_exc.InterfaceError, sa_exc.TimeoutError) as e:
        session.rollback()
        logger.warning("Store call %s failed: %s", operation, e)
        raise TransientError(f"Storage unavailable during {operation}") from e
