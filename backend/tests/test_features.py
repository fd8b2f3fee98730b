from smartrec.services.features import feature_label, has_feature, normalize_features


def test_normalize_features_accepts_all_encodings():
    raw = {
        "SwimmingPool": True,
        "garage": "yes",
        "view": "ocean",
        "gym": "no",
        "elevator": False,
        "wifi": 1,
        "security": "false",
        "balcony": "",
    }
    assert normalize_features(raw) == ("swimmingpool", "garage", "view", "wifi")


def test_normalize_features_from_list_and_empty():
    assert normalize_features(["Garden", "garden", "Pool"]) == ("garden", "pool")
    assert normalize_features(None) == ()
    assert normalize_features({}) == ()
    assert normalize_features("pool") == ()


def test_has_feature_is_case_insensitive_substring():
    features = normalize_features({"swimmingpool": True})
    assert has_feature(features, "Pool")
    assert not has_feature(features, "garage")
    assert not has_feature(features, "  ")


def test_feature_label():
    assert feature_label("swimmingpool") == "Pool"
    assert feature_label("rooftop_terrace") == "Rooftop Terrace"
