"""Listing feature normalization.

Listings store ``property_features`` as an open map whose values arrive in
several encodings (``True``, ``"yes"``, ``"true"``, ``1``, free text such as
``"ocean"``), and older rows hold a plain list of names. Everything
downstream works with one representation: a tuple of lower-cased names of the
features that are present, in source order.
"""

from typing import Any, Iterable

_FALSY_STRINGS = frozenset({"", "no", "false", "0", "none", "n/a"})

FEATURE_LABELS = {
    "swimmingpool": "Pool",
    "pool": "Pool",
    "garage": "Garage",
    "parking": "Parking",
    "garden": "Garden",
    "gym": "Gym",
    "security": "Security",
    "cctv": "CCTV",
    "elevator": "Elevator",
    "airconditioner": "AC",
    "wifi": "WiFi",
    "balcony": "Balcony",
    "furnished": "Furnished",
    "beachaccess": "Beach Access",
}


def _is_present(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() not in _FALSY_STRINGS
    return False


def normalize_features(raw: Any) -> tuple[str, ...]:
    """Return the lower-cased names of present features, de-duplicated."""
    if not raw:
        return ()

    if isinstance(raw, dict):
        names: Iterable = (key for key, value in raw.items() if _is_present(value))
    elif isinstance(raw, (list, tuple, set)):
        names = (item for item in raw if isinstance(item, str))
    else:
        return ()

    seen: dict[str, None] = {}
    for name in names:
        key = str(name).strip().lower()
        if key:
            seen.setdefault(key, None)
    return tuple(seen)


def has_feature(features: Iterable[str], wanted: str) -> bool:
    """Case-insensitive substring match of ``wanted`` against any feature name."""
    needle = wanted.strip().lower()
    if not needle:
        return False
    return any(needle in feature for feature in features)


def feature_label(name: str) -> str:
    return FEATURE_LABELS.get(name, name.replace("_", " ").title())
