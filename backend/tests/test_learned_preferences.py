from types import SimpleNamespace

import pytest

from smartrec.services.learned_preferences import decayed_confidence, merge_learned, plan_reinforcements


def _row(pattern_type, key, value, confidence):
    return SimpleNamespace(pattern_type=pattern_type, pattern_key=key, pattern_value=value, confidence_score=confidence)


def test_merge_discounts_affinity_by_confidence():
    summary = merge_learned([
        _row("feature_affinity", "pool", {"score": 0.8}, 0.6),
        _row("feature_affinity", "garden", {}, None),
    ])
    assert summary.feature_affinities["pool"] == pytest.approx(0.48)
    assert summary.feature_affinities["garden"] == pytest.approx(0.25)


def test_merge_keeps_only_confident_styles():
    summary = merge_learned([
        _row("style_preference", "villa", {"preferred": True}, 0.7),
        _row("style_preference", "apartment", {"preferred": True}, 0.6),
    ])
    assert summary.style_preferences == ["villa"]


def test_views_never_reinforce():
    snapshot = {"property_type": "Villa", "property_features": {"pool": True}}
    assert plan_reinforcements(snapshot, "view") == []
    assert plan_reinforcements(None, "save") == []


def test_save_reinforces_features_and_style():
    snapshot = {
        "property_type": "Villa",
        "property_features": {"a": True, "b": "yes", "c": True, "d": True, "e": True, "f": True, "g": "no"},
    }
    rows = plan_reinforcements(snapshot, "save")

    features = [r for r in rows if r["pattern_type"] == "feature_affinity"]
    assert [r["pattern_key"] for r in features] == ["a", "b", "c", "d", "e"]
    assert all(r["pattern_value"] == {"score": 0.8} and r["confidence_score"] == 0.6 for r in features)

    styles = [r for r in rows if r["pattern_type"] == "style_preference"]
    assert len(styles) == 1
    assert styles[0]["pattern_key"] == "villa"
    assert styles[0]["pattern_value"] == {"preferred": True}
    assert styles[0]["confidence_score"] == 0.7


def test_weak_signal_reinforces_features_only():
    snapshot = {"property_type": "Villa", "property_features": ["Pool"]}
    rows = plan_reinforcements(snapshot, "share")
    assert len(rows) == 1
    assert rows[0]["pattern_key"] == "pool"
    assert rows[0]["pattern_value"] == {"score": 0.5}


def test_decay_moves_toward_neutral():
    assert decayed_confidence(0.9, days=14, half_life=14) == pytest.approx(0.7)
    assert decayed_confidence(0.1, days=14, half_life=14) == pytest.approx(0.3)
    assert decayed_confidence(0.5) == 0.5
