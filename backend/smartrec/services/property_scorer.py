"""Property scorer — rates one listing against one user profile.

Five weighted preference factors (location, price, size, type, features)
produce the preference score; up to four conditional factors produce a
separate discovery score. Both are 0-100 integers. Pure and deterministic
given ``now``.
"""

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone

from smartrec.models.property import Property
from smartrec.services.features import feature_label, has_feature, normalize_features
from smartrec.services.profile import UserProfile

# Location
LOCATION_EXPLICIT = 1.0
LOCATION_IMPLICIT = 0.8
LOCATION_OTHER = 0.3

# Price
PRICE_IN_BUDGET = 1.0
PRICE_IN_VIEWED_RANGE = 0.7
PRICE_BELOW_BUDGET = 0.5
PRICE_NO_BUDGET = 0.5
PRICE_NEAR_BUDGET = 0.4
PRICE_ABOVE_BUDGET = 0.0
BELOW_BUDGET_RATIO = 0.8
ABOVE_BUDGET_RATIO = 1.2

# Size
SIZE_IN_RANGE = 1.0
SIZE_OFF_BY_ONE = 0.7
SIZE_NO_PREFERENCE = 0.5
SIZE_OTHER = 0.3

# Property type
TYPE_EXPLICIT = 1.0
TYPE_DWELL = 0.8
TYPE_OTHER = 0.4

# Features
FEATURES_DEAL_BREAKER = 0.0
FEATURES_ALL_MUST_HAVES = 1.0
FEATURES_AFFINITY = 0.8
FEATURES_DEFAULT = 0.5
AFFINITY_THRESHOLD = 0.5

# Discovery
NEW_LISTING_DAYS = 7
RECENT_LISTING_DAYS = 14
NEW_LISTING_SCORE, NEW_LISTING_WEIGHT = 0.9, 0.3
RECENT_LISTING_SCORE, RECENT_LISTING_WEIGHT = 0.6, 0.2
VALUE_PRICE_PER_BEDROOM = 500_000_000
VALUE_SCORE, VALUE_WEIGHT = 0.85, 0.3
STYLE_OPENNESS_THRESHOLD = 0.3
STYLE_SCORE, STYLE_WEIGHT = 0.6, 0.2
# Stand-in until market data is wired in
TREND_SCORE, TREND_WEIGHT = 0.5, 0.2
DISCOVERY_DEFAULT = 50

# Classification
DISCOVERY_MAX_PREFERENCE = 60
DISCOVERY_MIN_DISCOVERY = 50
PREFERENCE_BLEND = 0.8
DISCOVERY_BLEND = 0.2


@dataclass
class MatchReason:
    factor: str
    score: float
    explanation: str
    weight: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class MatchResult:
    property_id: str
    overall_score: int
    preference_score: int
    discovery_score: int
    match_reasons: list[MatchReason] = field(default_factory=list)
    discovery_reasons: list[MatchReason] | None = None
    is_discovery_match: bool = False

    def to_dict(self) -> dict:
        return {
            "propertyId": self.property_id,
            "overallScore": self.overall_score,
            "preferenceScore": self.preference_score,
            "discoveryScore": self.discovery_score,
            "matchReasons": [reason.to_dict() for reason in self.match_reasons],
            "discoveryReasons": (
                [reason.to_dict() for reason in self.discovery_reasons]
                if self.discovery_reasons is not None
                else None
            ),
            "isDiscoveryMatch": self.is_discovery_match,
        }


def _format_price(price: float) -> str:
    return f"{price:,.0f}"


def _location_text(prop: Property) -> str:
    return prop.location or prop.city or ""


def score_location(prop: Property, profile: UserProfile) -> MatchReason:
    weight = profile.weights.location
    display = _location_text(prop)
    haystack = " ".join(part for part in (prop.location, prop.city) if part).lower()

    def matches(candidates: list[str]) -> bool:
        return any(c.strip() and c.strip().lower() in haystack for c in candidates)

    if matches(profile.explicit.preferred_locations):
        return MatchReason("Location", LOCATION_EXPLICIT, f"Located in your preferred area: {display}", weight)
    if matches(profile.implicit.location_clusters):
        return MatchReason("Location", LOCATION_IMPLICIT, f"Similar to areas you've browsed: {display}", weight)
    return MatchReason("Location", LOCATION_OTHER, f"New area to explore: {display}", weight)


def score_price(prop: Property, profile: UserProfile) -> MatchReason:
    weight = profile.weights.price
    price = prop.price or 0
    explicit_min = profile.explicit.min_budget
    explicit_max = profile.explicit.max_budget
    has_budget = explicit_min is not None or explicit_max is not None
    low = explicit_min or 0
    high = explicit_max if explicit_max is not None else math.inf
    viewed = profile.implicit.viewed_price_range

    if has_budget and low <= price <= high:
        return MatchReason("Price", PRICE_IN_BUDGET, "Within your budget", weight)
    if viewed.is_bounded and viewed.contains(price):
        return MatchReason(
            "Price", PRICE_IN_VIEWED_RANGE,
            f"Similar to properties you've viewed ({_format_price(price)})", weight,
        )
    if explicit_min and price < explicit_min * BELOW_BUDGET_RATIO:
        return MatchReason(
            "Price", PRICE_BELOW_BUDGET, f"Below budget - potential value ({_format_price(price)})", weight,
        )
    if explicit_max is not None and price > explicit_max * ABOVE_BUDGET_RATIO:
        return MatchReason("Price", PRICE_ABOVE_BUDGET, f"Above budget ({_format_price(price)})", weight)
    if not has_budget:
        return MatchReason("Price", PRICE_NO_BUDGET, f"Priced at {_format_price(price)}", weight)
    return MatchReason(
        "Price", PRICE_NEAR_BUDGET, f"Slightly outside your range ({_format_price(price)})", weight,
    )


def score_size(prop: Property, profile: UserProfile) -> MatchReason:
    weight = profile.weights.size
    bedrooms = prop.bedrooms or 0
    min_bed = profile.explicit.min_bedrooms
    max_bed = profile.explicit.max_bedrooms

    if min_bed is None and max_bed is None:
        return MatchReason("Size", SIZE_NO_PREFERENCE, f"{bedrooms} bedrooms available", weight)

    low = min_bed if min_bed is not None else 0
    high = max_bed if max_bed is not None else math.inf
    if low <= bedrooms <= high:
        return MatchReason("Size", SIZE_IN_RANGE, f"{bedrooms} bedrooms matches your needs", weight)
    if (min_bed is not None and bedrooms == min_bed - 1) or (max_bed is not None and bedrooms == max_bed + 1):
        return MatchReason("Size", SIZE_OFF_BY_ONE, f"{bedrooms} bedrooms - close to your preference", weight)
    return MatchReason("Size", SIZE_OTHER, f"{bedrooms} bedrooms available", weight)


def score_type(prop: Property, profile: UserProfile) -> MatchReason:
    weight = profile.weights.type
    display = prop.property_type or "Unspecified type"
    property_type = (prop.property_type or "").lower()

    explicit_match = bool(property_type) and any(
        t.strip() and t.strip().lower() in property_type for t in profile.explicit.preferred_property_types
    )
    if explicit_match:
        return MatchReason("Property Type", TYPE_EXPLICIT, f"{display} - your preferred type", weight)

    dwell_by_type = profile.implicit.dwell_time_by_type
    average_dwell = sum(dwell_by_type.values()) / max(len(dwell_by_type), 1)
    if dwell_by_type.get(property_type, 0) > average_dwell:
        return MatchReason("Property Type", TYPE_DWELL, f"{display} - you've shown interest in this type", weight)

    return MatchReason("Property Type", TYPE_OTHER, display, weight)


def score_features(prop: Property, profile: UserProfile) -> MatchReason:
    weight = profile.weights.features
    features = normalize_features(prop.property_features)
    must_haves = profile.explicit.must_have_features

    blocked = [d for d in profile.explicit.deal_breakers if has_feature(features, d)]
    if blocked:
        return MatchReason(
            "Features", FEATURES_DEAL_BREAKER,
            f"Contains features you want to avoid: {', '.join(blocked)}", weight,
        )

    if must_haves and all(has_feature(features, f) for f in must_haves):
        return MatchReason("Features", FEATURES_ALL_MUST_HAVES, "Has all your must-have features", weight)

    affinity = sum(
        score for feature, score in profile.implicit.feature_affinities.items()
        if has_feature(features, feature)
    )
    if affinity > AFFINITY_THRESHOLD:
        return MatchReason("Features", FEATURES_AFFINITY, "Features you've shown interest in", weight)

    if features:
        labels = ", ".join(feature_label(f) for f in features[:3])
        return MatchReason("Features", FEATURES_DEFAULT, f"{len(features)} features available ({labels})", weight)
    return MatchReason("Features", FEATURES_DEFAULT, "0 features available", weight)


def _listing_age_days(prop: Property, now: datetime) -> float | None:
    created_at = prop.created_at
    if created_at is None:
        return None
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return (now - created_at).total_seconds() / 86400


def discovery_reasons(prop: Property, profile: UserProfile, now: datetime) -> list[MatchReason]:
    reasons = []

    age = _listing_age_days(prop, now)
    if age is not None and age < NEW_LISTING_DAYS:
        reasons.append(MatchReason(
            "New Listing", NEW_LISTING_SCORE, "Just listed - be among the first to see it", NEW_LISTING_WEIGHT,
        ))
    elif age is not None and age < RECENT_LISTING_DAYS:
        reasons.append(MatchReason(
            "New Listing", RECENT_LISTING_SCORE, "Listed in the last two weeks", RECENT_LISTING_WEIGHT,
        ))

    if prop.price and prop.bedrooms and prop.price / prop.bedrooms < VALUE_PRICE_PER_BEDROOM:
        reasons.append(MatchReason("Value Discovery", VALUE_SCORE, "Strong value for the size", VALUE_WEIGHT))

    property_type = (prop.property_type or "").lower()
    if (
        property_type
        and property_type not in profile.implicit.style_preferences
        and profile.discovery_openness > STYLE_OPENNESS_THRESHOLD
    ):
        reasons.append(MatchReason("Style Discovery", STYLE_SCORE, "A different style you might like", STYLE_WEIGHT))

    reasons.append(MatchReason("Market Trend", TREND_SCORE, "Steady interest in this market", TREND_WEIGHT))
    return reasons


def _weighted_percent(reasons: list[MatchReason], default: int) -> int:
    total_weight = sum(r.weight for r in reasons)
    if total_weight <= 0:
        return default
    value = sum(r.score * r.weight for r in reasons) / total_weight * 100
    return max(0, min(100, round(value)))


def score_property(prop: Property, profile: UserProfile, now: datetime | None = None) -> MatchResult:
    """Score one listing for one profile."""
    now = now or datetime.now(timezone.utc)

    match_reasons = [
        score_location(prop, profile),
        score_price(prop, profile),
        score_size(prop, profile),
        score_type(prop, profile),
        score_features(prop, profile),
    ]
    preference_score = _weighted_percent(match_reasons, default=0)

    reasons = discovery_reasons(prop, profile, now)
    discovery_score = _weighted_percent(reasons, default=DISCOVERY_DEFAULT)

    is_discovery_match = preference_score < DISCOVERY_MAX_PREFERENCE and discovery_score > DISCOVERY_MIN_DISCOVERY
    if is_discovery_match:
        overall_score = discovery_score
    else:
        overall_score = round(preference_score * PREFERENCE_BLEND + discovery_score * DISCOVERY_BLEND)

    return MatchResult(
        property_id=str(prop.id),
        overall_score=overall_score,
        preference_score=preference_score,
        discovery_score=discovery_score,
        match_reasons=match_reasons,
        discovery_reasons=reasons,
        is_discovery_match=is_discovery_match,
    )
