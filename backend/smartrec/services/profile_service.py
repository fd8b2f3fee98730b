"""Profile builder — composes explicit, implicit and learned preferences."""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from smartrec.config import get_settings
from smartrec.models.behavior_signal import UserBehaviorSignal
from smartrec.models.learned_preference import LearnedPreference
from smartrec.models.user_interaction import UserInteraction
from smartrec.models.user_preference_profile import UserPreferenceProfile
from smartrec.services.behavior_aggregator import aggregate_behavior
from smartrec.services.learned_preferences import merge_learned
from smartrec.services.profile import (
    DEFAULT_DISCOVERY_OPENNESS,
    DEFAULT_WEIGHTS,
    ENOUGH_DATA_THRESHOLD,
    ExplicitPreferences,
    ImplicitPreferences,
    ScoringWeights,
    UserProfile,
    anonymous_profile,
)

logger = logging.getLogger(__name__)
settings = get_settings()

ACTIVITY_SAMPLE_SIZE = 50


def _window_start() -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=settings.signal_window_days)


def _weight(value: float | None, key: str) -> float:
    return DEFAULT_WEIGHTS[key] if value is None else value


def explicit_from_row(row: UserPreferenceProfile | None) -> ExplicitPreferences:
    if row is None:
        return ExplicitPreferences()
    return ExplicitPreferences(
        min_budget=row.min_budget,
        max_budget=row.max_budget,
        preferred_locations=list(row.preferred_locations or []),
        preferred_property_types=list(row.preferred_property_types or []),
        min_bedrooms=row.min_bedrooms,
        max_bedrooms=row.max_bedrooms,
        must_have_features=list(row.must_have_features or []),
        deal_breakers=list(row.deal_breakers or []),
    )


def weights_from_row(row: UserPreferenceProfile | None) -> ScoringWeights:
    if row is None:
        return ScoringWeights()
    return ScoringWeights(
        location=_weight(row.location_weight, "location"),
        price=_weight(row.price_weight, "price"),
        size=_weight(row.size_weight, "size"),
        features=_weight(row.features_weight, "features"),
        type=_weight(row.type_weight, "type"),
    )


def compose_profile(
    explicit_row: UserPreferenceProfile | None,
    signals: list,
    interactions: list,
    learned_rows: list,
) -> UserProfile:
    """Combine fetched rows into a UserProfile. No I/O."""
    behavior = aggregate_behavior(signals, interactions)
    learned = merge_learned(learned_rows)

    openness = DEFAULT_DISCOVERY_OPENNESS
    if explicit_row is not None and explicit_row.discovery_openness is not None:
        openness = min(1.0, max(0.0, explicit_row.discovery_openness))

    return UserProfile(
        explicit=explicit_from_row(explicit_row),
        implicit=ImplicitPreferences(
            viewed_price_range=behavior.price_range,
            dwell_time_by_type=behavior.dwell_time_by_type,
            location_clusters=behavior.location_clusters,
            feature_affinities=learned.feature_affinities,
            style_preferences=learned.style_preferences,
            time_patterns=behavior.time_patterns,
        ),
        weights=weights_from_row(explicit_row),
        discovery_openness=openness,
        has_enough_data=len(signals) + len(interactions) >= ENOUGH_DATA_THRESHOLD,
    )


async def build_profile(db: AsyncSession, user_id: UUID | None) -> UserProfile:
    """Build the profile for a user, or the anonymous default when unknown."""
    if user_id is None:
        return anonymous_profile()

    since = _window_start()

    explicit_row = (
        await db.execute(select(UserPreferenceProfile).where(UserPreferenceProfile.user_id == user_id))
    ).scalar_one_or_none()

    signals = (
        await db.execute(
            select(UserBehaviorSignal)
            .where(UserBehaviorSignal.user_id == user_id, UserBehaviorSignal.created_at >= since)
            .order_by(UserBehaviorSignal.created_at.desc())
            .limit(settings.signal_fetch_limit)
        )
    ).scalars().all()

    interactions = (
        await db.execute(
            select(UserInteraction)
            .where(UserInteraction.user_id == user_id, UserInteraction.created_at >= since)
            .order_by(UserInteraction.created_at.desc())
            .limit(settings.signal_fetch_limit)
        )
    ).scalars().all()

    learned_rows = (
        await db.execute(select(LearnedPreference).where(LearnedPreference.user_id == user_id))
    ).scalars().all()

    profile = compose_profile(explicit_row, list(signals), list(interactions), list(learned_rows))
    logger.debug(
        "Built profile for user %s (%d signals, %d interactions, %d learned)",
        user_id, len(signals), len(interactions), len(learned_rows),
    )
    return profile


async def get_activity_summary(db: AsyncSession, user_id: UUID) -> dict:
    """Counts over the most recent signals plus legacy interactions in the window."""
    recent = (
        await db.execute(
            select(UserBehaviorSignal.signal_type, UserBehaviorSignal.created_at)
            .where(UserBehaviorSignal.user_id == user_id)
            .order_by(UserBehaviorSignal.created_at.desc())
            .limit(ACTIVITY_SAMPLE_SIZE)
        )
    ).all()

    interactions = (
        await db.execute(
            select(UserInteraction.created_at)
            .where(UserInteraction.user_id == user_id, UserInteraction.created_at >= _window_start())
            .order_by(UserInteraction.created_at.desc())
            .limit(settings.signal_fetch_limit)
        )
    ).scalars().all()

    timestamps = [row.created_at for row in recent[:1]] + list(interactions[:1])
    last_active = max(timestamps) if timestamps else None

    return {
        "totalViews": sum(1 for row in recent if row.signal_type == "view"),
        "totalSaves": sum(1 for row in recent if row.signal_type == "save"),
        "totalInquiries": sum(1 for row in recent if row.signal_type == "inquiry"),
        "totalInteractions": len(interactions),
        "lastActive": last_active.isoformat() if last_active else None,
    }
