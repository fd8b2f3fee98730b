"""Reduce raw behavior rows into implicit-preference statistics.

Pure functions over already-fetched rows: ``UserBehaviorSignal`` records
(with their ``property_snapshot``) and legacy ``UserInteraction`` records
(whose ``interaction_data`` payload carries the same listing fields, loosely).
"""

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from smartrec.services.profile import PriceRange

TOP_LOCATIONS = 5
TOP_HOURS = 3

# Legacy interactions carry no duration; each counts as one unit of dwell
LEGACY_DWELL_UNIT = 1


@dataclass
class BehaviorSummary:
    price_range: PriceRange = field(default_factory=PriceRange)
    dwell_time_by_type: dict[str, float] = field(default_factory=dict)
    location_clusters: list[str] = field(default_factory=list)
    time_patterns: list[str] = field(default_factory=list)


def hour_bucket(hour: int) -> str:
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    return "evening"


def _price(value) -> float | None:
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if price > 0 else None


def trimmed_price_range(prices: list[float]) -> PriceRange:
    """10th/90th percentile (by index) of the observed prices."""
    if not prices:
        return PriceRange(0.0, math.inf)
    ordered = sorted(prices)
    low = ordered[int(len(ordered) * 0.1)]
    high = ordered[min(int(len(ordered) * 0.9), len(ordered) - 1)]
    return PriceRange(low, high)


def aggregate_behavior(signals: Iterable, interactions: Iterable = ()) -> BehaviorSummary:
    """Fold signals and legacy interactions into one BehaviorSummary."""
    prices: list[float] = []
    dwell: dict[str, float] = {}
    locations: Counter = Counter()
    hours: Counter = Counter()

    for signal in signals:
        snapshot = signal.property_snapshot or {}

        price = _price(snapshot.get("price"))
        if price is not None:
            prices.append(price)

        property_type = (snapshot.get("property_type") or "").lower()
        if property_type and signal.time_spent_seconds:
            dwell[property_type] = dwell.get(property_type, 0) + signal.time_spent_seconds

        location = snapshot.get("location") or snapshot.get("city")
        if location:
            locations[location] += 1

        if signal.created_at is not None:
            hours[signal.created_at.hour] += 1

    for interaction in interactions:
        data = interaction.interaction_data or {}

        price = _price(data.get("price"))
        if price is not None:
            prices.append(price)

        property_type = (data.get("property_type") or "").lower()
        if property_type:
            dwell[property_type] = dwell.get(property_type, 0) + LEGACY_DWELL_UNIT

        location = data.get("location") or data.get("city")
        if location:
            locations[location] += 1

    peak_hours = [hour for hour, _ in hours.most_common(TOP_HOURS)]
    time_patterns = list(dict.fromkeys(hour_bucket(hour) for hour in peak_hours))

    return BehaviorSummary(
        price_range=trimmed_price_range(prices),
        dwell_time_by_type=dwell,
        location_clusters=[location for location, _ in locations.most_common(TOP_LOCATIONS)],
        time_patterns=time_patterns,
    )
