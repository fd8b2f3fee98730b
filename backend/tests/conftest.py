"""Shared fixtures. The engine modules are pointed at in-memory SQLite before import."""

import os
import uuid
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("TEXT_GENERATION_API_KEY", "")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from smartrec.models import Base, Property
from smartrec.services.profile import ExplicitPreferences, UserProfile

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_property():
    def _make(**overrides) -> Property:
        fields = {
            "id": uuid.uuid4(),
            "title": "Family house",
            "price": 1_500_000_000,
            "location": "Canggu, Bali",
            "city": "Badung",
            "property_type": "villa",
            "bedrooms": 3,
            "bathrooms": 2,
            "property_features": {"swimmingpool": True, "garden": "yes", "gym": "no"},
            "status": "active",
            "approval_status": "approved",
            "created_at": NOW - timedelta(days=30),
        }
        fields.update(overrides)
        return Property(**fields)

    return _make


@pytest.fixture
def matching_profile():
    """A profile whose explicit preferences the default make_property() listing satisfies."""
    return UserProfile(
        explicit=ExplicitPreferences(
            min_budget=1_000_000_000,
            max_budget=2_000_000_000,
            preferred_locations=["canggu"],
            preferred_property_types=["villa"],
            min_bedrooms=2,
            max_bedrooms=4,
            must_have_features=["pool"],
            deal_breakers=[],
        ),
    )


@pytest.fixture
def sync_session_factory(monkeypatch):
    """In-memory SQLite sessionmaker swapped in for the Celery tasks' SyncSessionLocal."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    from smartrec.tasks import recommendation_tasks
    monkeypatch.setattr(recommendation_tasks, "SyncSessionLocal", factory)

    yield factory
    engine.dispose()


@pytest.fixture
async def db():
    """Async session on a fresh in-memory SQLite database."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()
