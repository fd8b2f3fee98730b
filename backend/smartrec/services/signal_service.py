"""Write paths — behavior signals, explicit preference edits, feedback."""

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from smartrec.models.base import dialect_insert
from smartrec.models.behavior_signal import UserBehaviorSignal
from smartrec.models.property import Property
from smartrec.models.recommendation_history import RecommendationHistory
from smartrec.models.user_preference_profile import UserPreferenceProfile
from smartrec.tasks.dispatch import dispatch

logger = logging.getLogger(__name__)

BASE_STRENGTHS = {
    "view": 0.3,
    "dwell": 0.5,
    "save": 0.8,
    "share": 0.7,
    "inquiry": 1.0,
    "revisit": 0.6,
    "compare": 0.4,
}
DEFAULT_STRENGTH = 0.3

# (field, threshold, multiplier) — bonuses compound
ENGAGEMENT_BONUSES = (
    ("time_spent", 120, 1.3),
    ("scroll_depth", 80, 1.2),
    ("photos_viewed", 5, 1.1),
)
MAX_STRENGTH = 1.0


def signal_strength(signal_type: str, signal_data: dict[str, Any] | None) -> float:
    """Base strength for the signal type, boosted by engagement depth, capped at 1.0."""
    data = signal_data or {}
    strength = BASE_STRENGTHS.get(signal_type, DEFAULT_STRENGTH)

    for key, threshold, multiplier in ENGAGEMENT_BONUSES:
        value = data.get(key)
        if isinstance(value, (int, float)) and value > threshold:
            strength *= multiplier

    return min(round(strength, 4), MAX_STRENGTH)


async def _property_snapshot(db: AsyncSession, property_id: UUID) -> dict | None:
    prop = (await db.execute(select(Property).where(Property.id == property_id))).scalar_one_or_none()
    return prop.snapshot() if prop else None


def _dispatch_reinforcement(user_id: UUID, snapshot: dict, signal_type: str) -> None:
    """Queue learned-preference upserts. At most once; never raises or waits on the broker."""
    from smartrec.tasks.recommendation_tasks import reinforce_learned_preferences
    dispatch(
        reinforce_learned_preferences, str(user_id), snapshot, signal_type,
        description=f"preference reinforcement for user {user_id}",
    )


async def record_signal(
    db: AsyncSession,
    user_id: UUID,
    property_id: UUID,
    signal_type: str,
    signal_data: dict[str, Any] | None = None,
) -> None:
    """Append a behavior signal, then queue learned-preference reinforcement."""
    data = signal_data or {}
    snapshot = await _property_snapshot(db, property_id)
    if snapshot is None:
        logger.info("No listing snapshot for property %s; recording signal without it", property_id)

    db.add(UserBehaviorSignal(
        user_id=user_id,
        property_id=property_id,
        signal_type=signal_type,
        signal_strength=signal_strength(signal_type, data),
        time_spent_seconds=data.get("time_spent"),
        scroll_depth=data.get("scroll_depth"),
        photos_viewed=data.get("photos_viewed"),
        sections_expanded=data.get("sections_expanded"),
        property_snapshot=snapshot,
        session_id=data.get("session_id"),
        device_type=data.get("device_type"),
    ))
    await db.flush()

    if snapshot and signal_type != "view":
        _dispatch_reinforcement(user_id, snapshot, signal_type)


async def update_preferences(db: AsyncSession, user_id: UUID, preferences: dict[str, Any]) -> None:
    """Upsert the user's explicit preference row with the known fields given."""
    values = {
        key: value for key, value in preferences.items()
        if key in UserPreferenceProfile.EDITABLE_FIELDS
    }
    ignored = set(preferences) - set(values)
    if ignored:
        logger.debug("Ignoring unknown preference fields for user %s: %s", user_id, sorted(ignored))

    now = datetime.now(timezone.utc)
    insert = dialect_insert(db.get_bind().dialect.name)

    stmt = insert(UserPreferenceProfile).values(user_id=user_id, updated_at=now, **values)
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id"],
        set_={**{key: stmt.excluded[key] for key in values}, "updated_at": now},
    )
    await db.execute(stmt)


async def provide_feedback(db: AsyncSession, recommendation_id: UUID, feedback: str) -> None:
    """Stamp feedback on a history row. Unknown ids update nothing."""
    await db.execute(
        update(RecommendationHistory)
        .where(RecommendationHistory.id == recommendation_id)
        .values(user_feedback=feedback, feedback_at=datetime.now(timezone.utc))
    )
