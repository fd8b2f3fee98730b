"""Learned preferences — merging stored patterns into a profile, and deriving
new reinforcements from behavior signals."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from smartrec.models.base import dialect_insert
from smartrec.models.learned_preference import LearnedPreference, FEATURE_AFFINITY, STYLE_PREFERENCE
from smartrec.services.features import normalize_features

STYLE_CONFIDENCE_THRESHOLD = 0.6

# Reinforcement constants
MAX_REINFORCED_FEATURES = 5
STRONG_SIGNALS = frozenset({"save", "inquiry"})
STRONG_AFFINITY = 0.8
WEAK_AFFINITY = 0.5
FEATURE_CONFIDENCE = 0.6
STYLE_CONFIDENCE = 0.7

NEUTRAL_CONFIDENCE = 0.5


@dataclass
class LearnedSummary:
    feature_affinities: dict[str, float] = field(default_factory=dict)
    style_preferences: list[str] = field(default_factory=list)


def merge_learned(rows: Iterable) -> LearnedSummary:
    """Fold learned-preference rows into affinities and styles.

    Affinity is the stored score discounted by confidence. Styles are only
    trusted above the confidence threshold.
    """
    summary = LearnedSummary()
    for row in rows:
        value = row.pattern_value or {}
        confidence = row.confidence_score if row.confidence_score is not None else 0.5

        if row.pattern_type == FEATURE_AFFINITY:
            score = value.get("score")
            score = 0.5 if score is None else score
            summary.feature_affinities[row.pattern_key] = score * confidence
        elif row.pattern_type == STYLE_PREFERENCE and confidence > STYLE_CONFIDENCE_THRESHOLD:
            summary.style_preferences.append(row.pattern_key)
    return summary


def plan_reinforcements(snapshot: dict | None, signal_type: str) -> list[dict]:
    """Learned-preference rows a signal should upsert (without user_id).

    Bare views teach nothing. Other signals reinforce up to five present
    features; saves and inquiries also mark the listing's type as a style.
    """
    if not snapshot or signal_type == "view":
        return []

    now = datetime.now(timezone.utc)
    rows = []

    affinity = STRONG_AFFINITY if signal_type in STRONG_SIGNALS else WEAK_AFFINITY
    for feature in normalize_features(snapshot.get("property_features"))[:MAX_REINFORCED_FEATURES]:
        rows.append({
            "pattern_type": FEATURE_AFFINITY,
            "pattern_key": feature,
            "pattern_value": {"score": affinity},
            "confidence_score": FEATURE_CONFIDENCE,
            "sample_count": 1,
            "last_reinforced_at": now,
        })

    property_type = (snapshot.get("property_type") or "").strip().lower()
    if property_type and signal_type in STRONG_SIGNALS:
        rows.append({
            "pattern_type": STYLE_PREFERENCE,
            "pattern_key": property_type,
            "pattern_value": {"preferred": True},
            "confidence_score": STYLE_CONFIDENCE,
            "sample_count": 1,
            "last_reinforced_at": now,
        })

    return rows


def upsert_statement(dialect_name: str, values: dict):
    """INSERT ... ON CONFLICT (user, type, key) DO UPDATE for one pattern.

    The latest value and confidence win; sample_count accumulates.
    """
    stmt = dialect_insert(dialect_name)(LearnedPreference).values(**values)
    return stmt.on_conflict_do_update(
        index_elements=["user_id", "pattern_type", "pattern_key"],
        set_={
            "pattern_value": stmt.excluded.pattern_value,
            "confidence_score": stmt.excluded.confidence_score,
            "sample_count": LearnedPreference.sample_count + 1,
            "last_reinforced_at": stmt.excluded.last_reinforced_at,
            "updated_at": stmt.excluded.last_reinforced_at,
        },
    )


def decayed_confidence(confidence: float, days: float = 1.0, half_life: float = 14.0) -> float:
    """Move a confidence toward neutral (0.5).

    Formula: c = 0.5 + (c - 0.5) * 0.5^(days/half_life)
    """
    decay_factor = 0.5 ** (days / half_life)
    return round(NEUTRAL_CONFIDENCE + (confidence - NEUTRAL_CONFIDENCE) * decay_factor, 4)
