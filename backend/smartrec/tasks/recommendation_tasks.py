"""Celery tasks for best-effort writes: history rows and learned preferences."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select

from smartrec.tasks.celery_app import celery_app
from smartrec.models.base import SyncSessionLocal
from smartrec.models.learned_preference import LearnedPreference
from smartrec.models.recommendation_history import RecommendationHistory
from smartrec.services.learned_preferences import decayed_confidence, plan_reinforcements, upsert_statement

logger = logging.getLogger(__name__)


@celery_app.task(name="smartrec.tasks.recommendation_tasks.record_recommendation_history", ignore_result=True)
def record_recommendation_history(user_id: str, rows: list[dict]):
    """Insert one history row per shown recommendation."""
    with SyncSessionLocal() as session:
        try:
            for row in rows:
                session.add(RecommendationHistory(
                    user_id=UUID(user_id),
                    property_id=UUID(row["property_id"]),
                    overall_score=row["overall_score"],
                    preference_score=row["preference_score"],
                    discovery_score=row["discovery_score"],
                    match_reasons=row.get("match_reasons"),
                    discovery_reasons=row.get("discovery_reasons"),
                    recommendation_context=row.get("recommendation_context"),
                    position_shown=row.get("position_shown"),
                ))
            session.commit()
            logger.info("Recorded %d recommendation history rows for user %s", len(rows), user_id)

        except Exception:
            session.rollback()
            logger.exception("Failed to record recommendation history for user %s", user_id)
            raise


@celery_app.task(name="smartrec.tasks.recommendation_tasks.reinforce_learned_preferences", ignore_result=True)
def reinforce_learned_preferences(user_id: str, snapshot: dict, signal_type: str):
    """Upsert feature-affinity and style rows derived from one behavior signal.

    Each upsert commits on its own; a failure part-way leaves earlier
    reinforcements in place.
    """
    rows = plan_reinforcements(snapshot, signal_type)
    if not rows:
        return 0

    with SyncSessionLocal() as session:
        dialect_name = session.get_bind().dialect.name
        written = 0
        try:
            for values in rows:
                session.execute(upsert_statement(dialect_name, {"user_id": UUID(user_id), **values}))
                session.commit()
                written += 1
        except Exception:
            session.rollback()
            logger.exception(
                "Reinforced %d of %d learned preferences for user %s before failing",
                written, len(rows), user_id,
            )
            raise

    logger.info("Reinforced %d learned preferences for user %s (signal: %s)", written, user_id, signal_type)
    return written


@celery_app.task(name="smartrec.tasks.recommendation_tasks.decay_learned_preferences")
def decay_learned_preferences():
    """Apply daily decay to every learned preference's confidence (runs at 3 AM via beat).

    14-day half-life: unreinforced confidence drifts toward 0.5.
    """
    with SyncSessionLocal() as session:
        try:
            prefs = session.execute(select(LearnedPreference)).scalars().all()

            now = datetime.now(timezone.utc)
            for pref in prefs:
                pref.confidence_score = decayed_confidence(pref.confidence_score, days=1.0, half_life=14.0)
                pref.updated_at = now

            session.commit()
            if prefs:
                logger.info("Applied confidence decay to %d learned preferences", len(prefs))
            return len(prefs)

        except Exception:
            session.rollback()
            logger.exception("Failed to apply learned preference decay")
            raise
