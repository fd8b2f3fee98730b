"""SQLAlchemy models. Importing this package registers every table on Base.metadata."""

from smartrec.models.base import Base
from smartrec.models.property import Property
from smartrec.models.user_preference_profile import UserPreferenceProfile
from smartrec.models.behavior_signal import UserBehaviorSignal
from smartrec.models.user_interaction import UserInteraction
from smartrec.models.learned_preference import LearnedPreference, FEATURE_AFFINITY, STYLE_PREFERENCE
from smartrec.models.recommendation_history import RecommendationHistory

__all__ = [
    "Base",
    "Property",
    "UserPreferenceProfile",
    "UserBehaviorSignal",
    "UserInteraction",
    "LearnedPreference",
    "FEATURE_AFFINITY",
    "STYLE_PREFERENCE",
    "RecommendationHistory",
]
