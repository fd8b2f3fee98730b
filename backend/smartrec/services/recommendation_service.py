"""Recommendation orchestrator — candidate fetch, scoring, 80/20 blending."""

import logging
import math
from typing import Sequence, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from smartrec.config import get_settings
from smartrec.models.property import Property
from smartrec.services.profile_service import build_profile
from smartrec.services.property_scorer import MatchResult, score_property
from smartrec.tasks.dispatch import dispatch

logger = logging.getLogger(__name__)
settings = get_settings()

PREFERENCE_SHARE = 0.8
DISCOVERY_SHARE = 0.2
# Every DISCOVERY_SLOT-th position goes to a discovery pick
DISCOVERY_SLOT = 4

T = TypeVar("T")


def interleave(preference: Sequence[T], discovery: Sequence[T]) -> list[T]:
    """Merge the two pools, placing a discovery item at every 4th position.

    Relative order within each pool is kept. When one pool runs out the other
    fills the remaining positions.
    """
    result: list[T] = []
    pref_idx = 0
    disc_idx = 0

    for i in range(len(preference) + len(discovery)):
        if (i + 1) % DISCOVERY_SLOT == 0 and disc_idx < len(discovery):
            result.append(discovery[disc_idx])
            disc_idx += 1
        elif pref_idx < len(preference):
            result.append(preference[pref_idx])
            pref_idx += 1
        elif disc_idx < len(discovery):
            result.append(discovery[disc_idx])
            disc_idx += 1

    return result


def blend_results(scored: list[MatchResult], limit: int) -> tuple[list[MatchResult], list[MatchResult], list[MatchResult]]:
    """Split scored matches into pools and interleave them.

    Returns (blended, preference_pool, discovery_pool).
    """
    preference_pool = sorted(
        (m for m in scored if not m.is_discovery_match),
        key=lambda m: m.overall_score,
        reverse=True,
    )[: math.ceil(limit * PREFERENCE_SHARE)]

    discovery_pool = sorted(
        (m for m in scored if m.is_discovery_match),
        key=lambda m: m.discovery_score,
        reverse=True,
    )[: math.floor(limit * DISCOVERY_SHARE) + 1]

    blended = interleave(preference_pool, discovery_pool)[:limit]
    return blended, preference_pool, discovery_pool


async def fetch_candidates(db: AsyncSession) -> list[Property]:
    result = await db.execute(
        select(Property)
        .where(Property.status == "active", Property.approval_status == "approved")
        .order_by(Property.created_at.desc())
        .limit(settings.candidate_limit)
    )
    return list(result.scalars().all())


def history_rows(recommendations: list[MatchResult]) -> list[dict]:
    """JSON-safe history payloads for the top recommendations."""
    rows = []
    for position, rec in enumerate(recommendations[: settings.history_top_n], start=1):
        rows.append({
            "property_id": rec.property_id,
            "overall_score": rec.overall_score,
            "preference_score": rec.preference_score,
            "discovery_score": rec.discovery_score,
            "match_reasons": [r.to_dict() for r in rec.match_reasons],
            "discovery_reasons": [r.to_dict() for r in rec.discovery_reasons or []],
            "recommendation_context": settings.recommendation_context,
            "position_shown": position,
        })
    return rows


def _dispatch_history(user_id: UUID, rows: list[dict]) -> None:
    """Queue history persistence. At most once; never raises or waits on the broker."""
    from smartrec.tasks.recommendation_tasks import record_recommendation_history
    dispatch(
        record_recommendation_history, str(user_id), rows,
        description=f"recommendation history for user {user_id}",
    )


async def get_recommendations(db: AsyncSession, user_id: UUID | None, limit: int) -> dict:
    """Ranked recommendations for a user (or the anonymous profile)."""
    profile = await build_profile(db, user_id)
    candidates = await fetch_candidates(db)

    scored = [score_property(prop, profile) for prop in candidates]
    recommendations, preference_pool, discovery_pool = blend_results(scored, limit)

    if user_id is not None and recommendations:
        _dispatch_history(user_id, history_rows(recommendations))

    by_id = {str(prop.id): prop for prop in candidates}
    enriched = [
        {**rec.to_dict(), "property": by_id[rec.property_id].to_dict()}
        for rec in recommendations
    ]

    logger.info(
        "Served %d recommendations (user=%s, candidates=%d, discovery=%d)",
        len(enriched), user_id, len(candidates), len(discovery_pool),
    )

    return {
        "recommendations": enriched,
        "userProfile": profile.to_dict(),
        "meta": {
            "totalCandidates": len(candidates),
            "preferenceMatches": len(preference_pool),
            "discoveryMatches": len(discovery_pool),
            "hasPersonalization": profile.has_enough_data,
        },
    }
