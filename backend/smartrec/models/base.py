"""Base database configuration and mixins."""

import uuid
from typing import AsyncGenerator

from sqlalchemy import JSON, Column, DateTime, func, create_engine
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, declared_attr, sessionmaker

from smartrec.config import get_settings

settings = get_settings()

# JSONB on PostgreSQL, plain JSON on other backends (SQLite in the test-suite)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _pool_options(url: str) -> dict:
    if url.startswith("postgresql"):
        return {"pool_size": 10, "max_overflow": 20, "pool_timeout": 30}
    return {}


# Async engine for FastAPI
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_pool_options(settings.database_url),
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Sync engine for Celery tasks
sync_engine = create_engine(
    settings.sync_database_url,
    echo=settings.debug,
    **_pool_options(settings.sync_database_url),
)

SyncSessionLocal = sessionmaker(
    bind=sync_engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower() + "s"


class TimestampMixin:
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class UUIDMixin:
    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def dialect_insert(dialect_name: str):
    """The dialect-specific ``insert`` that supports ON CONFLICT upserts."""
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise ValueError(f"Upsert not supported on dialect: {dialect_name}")
    return insert
