from datetime import timedelta

import pytest

from smartrec.services.profile import (
    ExplicitPreferences,
    ImplicitPreferences,
    PriceRange,
    ScoringWeights,
    UserProfile,
    anonymous_profile,
)
from smartrec.services.property_scorer import (
    score_features,
    score_location,
    score_price,
    score_property,
    score_size,
    score_type,
)


def _budget_profile(min_budget=None, max_budget=None, viewed=None):
    return UserProfile(
        explicit=ExplicitPreferences(min_budget=min_budget, max_budget=max_budget),
        implicit=ImplicitPreferences(viewed_price_range=viewed or PriceRange()),
    )


def test_full_explicit_match_scores_one_hundred(make_property, matching_profile, now):
    result = score_property(make_property(), matching_profile, now=now)

    assert result.preference_score == 100
    assert [r.factor for r in result.match_reasons] == ["Location", "Price", "Size", "Property Type", "Features"]
    assert all(r.score == 1.0 for r in result.match_reasons)
    assert result.discovery_score == 50
    assert not result.is_discovery_match
    assert result.overall_score == 90


def test_price_within_budget_scenario(make_property):
    profile = _budget_profile(1_000_000_000, 2_000_000_000)
    reason = score_price(make_property(price=1_500_000_000), profile)
    assert reason.score == 1.0
    assert reason.explanation == "Within your budget"


def test_price_tiers(make_property):
    profile = _budget_profile(1_000_000_000, 2_000_000_000, viewed=PriceRange(2_100_000_000, 2_200_000_000))
    assert score_price(make_property(price=2_150_000_000), profile).score == 0.7
    assert score_price(make_property(price=700_000_000), profile).score == 0.5
    assert score_price(make_property(price=2_500_000_000), profile).score == 0.0
    assert score_price(make_property(price=2_300_000_000), profile).score == 0.4
    assert score_price(make_property(price=900_000_000), profile).score == 0.4


def test_price_without_budget(make_property):
    assert score_price(make_property(), _budget_profile()).score == 0.5

    viewed = _budget_profile(viewed=PriceRange(1_000_000_000, 2_000_000_000))
    assert score_price(make_property(), viewed).score == 0.7


def test_location_tiers(make_property):
    prop = make_property(location="Ubud, Bali", city="Gianyar")
    explicit = UserProfile(explicit=ExplicitPreferences(preferred_locations=["UBUD"]))
    implicit = UserProfile(implicit=ImplicitPreferences(location_clusters=["gianyar"]))

    assert score_location(prop, explicit).score == 1.0
    assert score_location(prop, implicit).score == 0.8
    assert score_location(prop, UserProfile()).score == 0.3


def test_size_tiers(make_property):
    profile = UserProfile(explicit=ExplicitPreferences(min_bedrooms=2, max_bedrooms=3))
    assert score_size(make_property(bedrooms=3), profile).score == 1.0
    assert score_size(make_property(bedrooms=1), profile).score == 0.7
    assert score_size(make_property(bedrooms=4), profile).score == 0.7
    assert score_size(make_property(bedrooms=6), profile).score == 0.3
    assert score_size(make_property(bedrooms=3), UserProfile()).score == 0.5


def test_type_uses_dwell_time_above_average(make_property):
    profile = UserProfile(implicit=ImplicitPreferences(dwell_time_by_type={"villa": 300, "apartment": 100}))
    assert score_type(make_property(property_type="Villa"), profile).score == 0.8
    assert score_type(make_property(property_type="apartment"), profile).score == 0.4

    explicit = UserProfile(explicit=ExplicitPreferences(preferred_property_types=["apartment"]))
    assert score_type(make_property(property_type="Apartment"), explicit).score == 1.0


def test_deal_breaker_zeroes_features_regardless_of_other_matches(make_property, matching_profile):
    matching_profile.explicit.deal_breakers = ["garden"]
    prop = make_property()

    assert score_features(prop, matching_profile).score == 0.0
    result = score_property(prop, matching_profile)
    assert result.match_reasons[-1].score == 0.0
    assert result.preference_score == 85


def test_feature_affinity_and_default(make_property):
    affinity = UserProfile(implicit=ImplicitPreferences(feature_affinities={"pool": 0.48, "garden": 0.3}))
    assert score_features(make_property(), affinity).score == 0.8
    assert score_features(make_property(), UserProfile()).score == 0.5

    partial = UserProfile(explicit=ExplicitPreferences(must_have_features=["pool", "garage"]))
    assert score_features(make_property(), partial).score == 0.5


def test_zero_weights_null_a_factor(make_property, matching_profile):
    matching_profile.weights = ScoringWeights(location=0, price=1, size=0, features=0, type=0)
    matching_profile.explicit.preferred_locations = ["nowhere"]
    assert score_property(make_property(), matching_profile).preference_score == 100


def test_discovery_factors(make_property, now):
    profile = anonymous_profile()
    fresh = make_property(created_at=now - timedelta(days=2), price=900_000_000, bedrooms=3)
    result = score_property(fresh, profile, now=now)

    factors = {r.factor: r for r in result.discovery_reasons}
    assert set(factors) == {"New Listing", "Value Discovery", "Style Discovery", "Market Trend"}
    # (0.9*0.3 + 0.85*0.3 + 0.6*0.2 + 0.5*0.2) / 1.0 = 0.745
    assert result.discovery_score in (74, 75)

    recent = make_property(created_at=now - timedelta(days=10), price=3_000_000_000, bedrooms=3)
    result = score_property(recent, profile, now=now)
    factors = {r.factor: r for r in result.discovery_reasons}
    assert factors["New Listing"].score == 0.6
    assert "Value Discovery" not in factors


def test_style_discovery_respects_known_styles_and_openness(make_property, now):
    known = UserProfile(
        implicit=ImplicitPreferences(style_preferences=["villa"]),
        discovery_openness=0.9,
    )
    reasons = score_property(make_property(), known, now=now).discovery_reasons
    assert "Style Discovery" not in {r.factor for r in reasons}

    closed = UserProfile(discovery_openness=0.3)
    reasons = score_property(make_property(), closed, now=now).discovery_reasons
    assert "Style Discovery" not in {r.factor for r in reasons}


def test_discovery_match_classification(make_property, now):
    profile = anonymous_profile()
    prop = make_property(created_at=now - timedelta(days=1), price=300_000_000, bedrooms=2, location="Far", city="Away")
    result = score_property(prop, profile, now=now)

    assert result.preference_score < 60
    assert result.discovery_score > 50
    assert result.is_discovery_match
    assert result.overall_score == result.discovery_score


@pytest.mark.parametrize("price,bedrooms,features", [
    (0, 0, None),
    (None, None, {}),
    (10**13, 1, {"pool": True}),
    (1, 50, ["garage", "pool"]),
])
def test_scores_stay_in_bounds(make_property, matching_profile, now, price, bedrooms, features):
    for profile in (matching_profile, anonymous_profile(), UserProfile()):
        result = score_property(
            make_property(price=price, bedrooms=bedrooms, property_features=features, property_type=None),
            profile,
            now=now,
        )
        assert 0 <= result.preference_score <= 100
        assert 0 <= result.discovery_score <= 100
        assert len(result.match_reasons) == 5
        assert result.is_discovery_match == (result.preference_score < 60 and result.discovery_score > 50)


def test_to_dict_shape(make_property, matching_profile, now):
    data = score_property(make_property(), matching_profile, now=now).to_dict()
    assert set(data) == {
        "propertyId", "overallScore", "preferenceScore", "discoveryScore",
        "matchReasons", "discoveryReasons", "isDiscoveryMatch",
    }
    assert set(data["matchReasons"][0]) == {"factor", "score", "explanation", "weight"}
