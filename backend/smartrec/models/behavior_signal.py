"""Behavior signal model — append-only log of user-property engagement."""

from sqlalchemy import Column, String, Float, Integer, DateTime, Index, func
from sqlalchemy.dialects.postgresql import UUID

from smartrec.models.base import Base, JSONType, UUIDMixin


class UserBehaviorSignal(UUIDMixin, Base):
    __tablename__ = "user_behavior_signals"

    user_id = Column(UUID(as_uuid=True), nullable=False)
    property_id = Column(UUID(as_uuid=True), nullable=False)
    signal_type = Column(String(20), nullable=False)  # view, dwell, save, share, inquiry, revisit, compare
    signal_strength = Column(Float, nullable=False)

    time_spent_seconds = Column(Integer)
    scroll_depth = Column(Float)
    photos_viewed = Column(Integer)
    sections_expanded = Column(JSONType)

    # Listing fields as they were when the signal was recorded; never updated
    property_snapshot = Column(JSONType)

    session_id = Column(String(100))
    device_type = Column(String(20))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_signals_user_created", "user_id", "created_at"),
        Index("idx_signals_property", "property_id"),
    )
