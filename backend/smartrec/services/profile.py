"""User profile value types.

A profile is rebuilt on every request and never persisted as a unit. Anonymous
callers get ``anonymous_profile()``, a concrete value produced without I/O, so
the scorer never has to special-case a missing user.
"""

import math
from dataclasses import dataclass, field

DEFAULT_WEIGHTS = {
    "location": 0.25,
    "price": 0.25,
    "size": 0.20,
    "features": 0.15,
    "type": 0.15,
}

DEFAULT_DISCOVERY_OPENNESS = 0.2
ANONYMOUS_DISCOVERY_OPENNESS = 0.5

# Signals + interactions in the window before personalization is claimed
ENOUGH_DATA_THRESHOLD = 5


@dataclass
class PriceRange:
    min: float = 0.0
    max: float = math.inf

    def contains(self, price: float) -> bool:
        return self.min <= price <= self.max

    @property
    def is_bounded(self) -> bool:
        return not math.isinf(self.max)


@dataclass
class ExplicitPreferences:
    min_budget: float | None = None
    max_budget: float | None = None
    preferred_locations: list[str] = field(default_factory=list)
    preferred_property_types: list[str] = field(default_factory=list)
    min_bedrooms: int | None = None
    max_bedrooms: int | None = None
    must_have_features: list[str] = field(default_factory=list)
    deal_breakers: list[str] = field(default_factory=list)


@dataclass
class ImplicitPreferences:
    viewed_price_range: PriceRange = field(default_factory=PriceRange)
    dwell_time_by_type: dict[str, float] = field(default_factory=dict)
    location_clusters: list[str] = field(default_factory=list)
    feature_affinities: dict[str, float] = field(default_factory=dict)
    style_preferences: list[str] = field(default_factory=list)
    time_patterns: list[str] = field(default_factory=list)


@dataclass
class ScoringWeights:
    location: float = DEFAULT_WEIGHTS["location"]
    price: float = DEFAULT_WEIGHTS["price"]
    size: float = DEFAULT_WEIGHTS["size"]
    features: float = DEFAULT_WEIGHTS["features"]
    type: float = DEFAULT_WEIGHTS["type"]


@dataclass
class UserProfile:
    explicit: ExplicitPreferences = field(default_factory=ExplicitPreferences)
    implicit: ImplicitPreferences = field(default_factory=ImplicitPreferences)
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    discovery_openness: float = DEFAULT_DISCOVERY_OPENNESS
    has_enough_data: bool = False

    def to_dict(self) -> dict:
        """JSON shape returned to callers (camelCase, infinity as null)."""
        price_range = self.implicit.viewed_price_range
        return {
            "explicit": {
                "minBudget": self.explicit.min_budget,
                "maxBudget": self.explicit.max_budget,
                "preferredLocations": list(self.explicit.preferred_locations),
                "preferredPropertyTypes": list(self.explicit.preferred_property_types),
                "minBedrooms": self.explicit.min_bedrooms,
                "maxBedrooms": self.explicit.max_bedrooms,
                "mustHaveFeatures": list(self.explicit.must_have_features),
                "dealBreakers": list(self.explicit.deal_breakers),
            },
            "implicit": {
                "viewedPriceRange": {
                    "min": price_range.min,
                    "max": price_range.max if price_range.is_bounded else None,
                },
                "dwellTimeByType": dict(self.implicit.dwell_time_by_type),
                "locationClusters": list(self.implicit.location_clusters),
                "featureAffinities": dict(self.implicit.feature_affinities),
                "stylePreferences": list(self.implicit.style_preferences),
                "timePatterns": list(self.implicit.time_patterns),
            },
            "weights": {
                "location": self.weights.location,
                "price": self.weights.price,
                "size": self.weights.size,
                "features": self.weights.features,
                "type": self.weights.type,
            },
            "discoveryOpenness": self.discovery_openness,
            "hasEnoughData": self.has_enough_data,
        }


def anonymous_profile() -> UserProfile:
    """Fixed profile for callers with no resolvable identity."""
    return UserProfile(
        discovery_openness=ANONYMOUS_DISCOVERY_OPENNESS,
        has_enough_data=False,
    )
