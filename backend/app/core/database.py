"""Database engine, session factory and FastAPI session dependency.

Uses SQLAlchemy 2.0 async style. The engine is created lazily so that
importing models never opens a connection.
"""

import logging
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

from fastapi import HTTPException, status
from sqlalchemy import BigInteger, Integer, MetaData, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings

logger = logging.getLogger(__name__)

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntId = BigInteger().with_variant(Integer, "sqlite")


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the ``DateTime`` columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores FOREIGN KEY clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False, **pool_options) -> AsyncEngine:
    """Create an async engine; SQLite connections get foreign keys enforced."""
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=echo, **pool_options)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        **pool_options,
    )


def get_engine() -> AsyncEngine:
    """Get (or lazily create) the application engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        pool_options = {}
        if not settings.is_sqlite:
            pool_options = {
                "pool_size": settings.db_pool_size,
                "max_overflow": settings.db_max_overflow,
                "pool_timeout": settings.db_pool_timeout,
                "pool_recycle": settings.db_pool_recycle,
            }
        _engine = build_engine(settings.database_url, echo=settings.database_echo, **pool_options)
        logger.info("Database engine created (pool_size=%s)", pool_options.get("pool_size", "default"))
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get (or lazily create) the session factory bound to the engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a database session.

    Any exception raised while the request holds the session rolls back
    uncommitted work before it propagates.
    """
    session = get_session_factory()()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def init_models(engine: Optional[AsyncEngine] = None) -> None:
    """Create all tables (development and tests; production uses Alembic)."""
    import app.models  # noqa: F401  registers every table on Base.metadata

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Close pooled connections on shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


async def commit_or_conflict(db: AsyncSession, detail: str) -> None:
    """Commit the session, turning integrity violations into a 409.

    Unique values (login, email, server name, fingerprint, license uniqueId)
    are only guaranteed by the database, so a concurrent duplicate surfaces
    here rather than in a pre-check.
    """
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Integrity violation on commit: %s", e.orig)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)
