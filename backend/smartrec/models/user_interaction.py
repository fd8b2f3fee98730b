"""Legacy user interaction model — loose-schema events kept for profile continuity."""

from sqlalchemy import Column, String, DateTime, Index, func
from sqlalchemy.dialects.postgresql import UUID

from smartrec.models.base import Base, JSONType, UUIDMixin


class UserInteraction(UUIDMixin, Base):
    __tablename__ = "user_interactions"

    user_id = Column(UUID(as_uuid=True), nullable=False)
    property_id = Column(UUID(as_uuid=True))
    interaction_type = Column(String(30), nullable=False)  # view, search, favorite, contact, ...
    # Free-form payload; may carry price, property_type, location, city
    interaction_data = Column(JSONType, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_interactions_user_created", "user_id", "created_at"),
    )
