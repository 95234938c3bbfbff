"""Database Module with Monadic Error Handling

Async session management for the scenario store, with Result-based error
propagation for writes.
"""
from typing import AsyncIterator, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from core.config import settings
from core.errors import AppError, Ok, Err, Result, DatabaseErrorMapper
from core.logging import db_logger

T = TypeVar("T")

log = db_logger()

engine_kwargs = {
    "echo": settings.LOG_SQL,
}

if "sqlite" not in settings.DATABASE_URL:
    engine_kwargs.update({
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
    })

engine = create_async_engine(settings.DATABASE_URL, **engine_kwargs)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()

_db_mapper = DatabaseErrorMapper("database")


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency that yields database session."""
    async with AsyncSessionLocal() as session:
        yield session


async def init_db() -> None:
    """Create missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("database_initialized", tables=sorted(Base.metadata.tables))


async def create_entity(
    session: AsyncSession,
    entity: T,
) -> Result[T, AppError]:
    """Create entity in database.

    Returns:
        Ok(entity) on success (with populated ID)
        Err(AppError) on failure
    """
    try:
        session.add(entity)
        await session.commit()
        await session.refresh(entity)
        return Ok(entity)
    except SQLAlchemyError as e:
        await session.rollback()
        log.warning("create_failed", entity=type(entity).__name__, error=str(e))
        return Err(_db_mapper.map_exception(e))
