"""Learned preference model — reinforced beliefs about a user's taste."""

from sqlalchemy import Column, String, Float, Integer, DateTime, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from smartrec.models.base import Base, JSONType, TimestampMixin, UUIDMixin

FEATURE_AFFINITY = "feature_affinity"
STYLE_PREFERENCE = "style_preference"


class LearnedPreference(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "learned_preferences"

    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    pattern_type = Column(String(30), nullable=False)  # feature_affinity, style_preference
    pattern_key = Column(String(100), nullable=False)  # lower-cased feature name or property type
    pattern_value = Column(JSONType, nullable=False)  # {"score": 0.8} or {"preferred": true}
    confidence_score = Column(Float, nullable=False, default=0.5)
    sample_count = Column(Integer, nullable=False, default=1)
    last_reinforced_at = Column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint("user_id", "pattern_type", "pattern_key", name="uq_learned_pref_user_pattern"),
    )
