"""Explicit, user-set search preferences and scoring weights."""

from sqlalchemy import Column, Float, Integer
from sqlalchemy.dialects.postgresql import UUID

from smartrec.models.base import Base, JSONType, TimestampMixin, UUIDMixin


class UserPreferenceProfile(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "user_preference_profiles"

    user_id = Column(UUID(as_uuid=True), unique=True, nullable=False, index=True)

    min_budget = Column(Float)
    max_budget = Column(Float)
    min_bedrooms = Column(Integer)
    max_bedrooms = Column(Integer)

    # JSON string lists
    preferred_locations = Column(JSONType, default=list)
    preferred_property_types = Column(JSONType, default=list)
    must_have_features = Column(JSONType, default=list)
    deal_breakers = Column(JSONType, default=list)

    # Per-user weight overrides (NULL means use the default)
    location_weight = Column(Float)
    price_weight = Column(Float)
    size_weight = Column(Float)
    features_weight = Column(Float)
    type_weight = Column(Float)

    discovery_openness = Column(Float)

    # Columns a user may set through update_preferences
    EDITABLE_FIELDS = (
        "min_budget",
        "max_budget",
        "min_bedrooms",
        "max_bedrooms",
        "preferred_locations",
        "preferred_property_types",
        "must_have_features",
        "deal_breakers",
        "location_weight",
        "price_weight",
        "size_weight",
        "features_weight",
        "type_weight",
        "discovery_openness",
    )
