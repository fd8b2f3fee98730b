"""Recommendation history model — audit trail of what was shown."""

from sqlalchemy import Column, String, Float, Integer, DateTime, Index, func
from sqlalchemy.dialects.postgresql import UUID

from smartrec.models.base import Base, JSONType, UUIDMixin


class RecommendationHistory(UUIDMixin, Base):
    __tablename__ = "recommendation_history"

    user_id = Column(UUID(as_uuid=True), nullable=False)
    property_id = Column(UUID(as_uuid=True), nullable=False)
    overall_score = Column(Float, nullable=False)
    preference_score = Column(Float, nullable=False)
    discovery_score = Column(Float, nullable=False)
    match_reasons = Column(JSONType)
    discovery_reasons = Column(JSONType)
    recommendation_context = Column(String(50))
    position_shown = Column(Integer)

    user_feedback = Column(String(50))
    feedback_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_rec_history_user", "user_id", "created_at"),
    )
