"""Pydantic schemas for the engine's action-dispatch request body.

The wire format is camelCase; Python code reads the snake_case attributes.
"""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ACTIONS = (
    "get_recommendations",
    "get_user_profile",
    "record_signal",
    "update_preferences",
    "get_match_report",
    "provide_feedback",
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignalData(CamelModel):
    """Engagement details attached to a behavior signal."""

    time_spent: float | None = None
    scroll_depth: float | None = None
    photos_viewed: int | None = None
    sections_expanded: list[str] | None = None
    session_id: str | None = None
    device_type: str | None = None


class PreferencesUpdate(CamelModel):
    """Explicit preference edits. Unknown keys are ignored; omitted keys are left as they are."""

    min_budget: float | None = None
    max_budget: float | None = None
    min_bedrooms: int | None = Field(default=None, ge=0)
    max_bedrooms: int | None = Field(default=None, ge=0)
    preferred_locations: list[str] | None = None
    preferred_property_types: list[str] | None = None
    must_have_features: list[str] | None = None
    deal_breakers: list[str] | None = None
    location_weight: float | None = Field(default=None, ge=0)
    price_weight: float | None = Field(default=None, ge=0)
    size_weight: float | None = Field(default=None, ge=0)
    features_weight: float | None = Field(default=None, ge=0)
    type_weight: float | None = Field(default=None, ge=0)
    discovery_openness: float | None = Field(default=None, ge=0, le=1)


class EngineRequest(CamelModel):
    """Body of POST /api/v1/recommendations. Fields used depend on ``action``."""

    action: str
    user_id: UUID | None = None
    property_id: UUID | None = None
    limit: int | None = Field(default=None, ge=1)
    signal_type: str | None = None
    signal_data: SignalData | None = None
    preferences: PreferencesUpdate | None = None
    recommendation_id: UUID | None = None
    feedback: str | None = None

    def preference_values(self) -> dict[str, Any]:
        if self.preferences is None:
            return {}
        return self.preferences.model_dump(exclude_unset=True)
