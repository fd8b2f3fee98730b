import uuid

import pytest
from sqlalchemy import select

from smartrec.models import RecommendationHistory, UserBehaviorSignal, UserPreferenceProfile
from smartrec.services import signal_service
from smartrec.services.signal_service import BASE_STRENGTHS, signal_strength


@pytest.fixture
def reinforcements(monkeypatch):
    calls = []
    monkeypatch.setattr(signal_service, "_dispatch_reinforcement", lambda *args: calls.append(args))
    return calls


def test_signal_strength_base_values():
    assert signal_strength("view", {}) == 0.3
    assert signal_strength("inquiry", None) == 1.0
    assert signal_strength("mystery", {}) == 0.3


def test_signal_strength_bonuses_compound():
    assert signal_strength("view", {"time_spent": 121}) == pytest.approx(0.39)
    assert signal_strength("view", {"time_spent": 121, "scroll_depth": 81, "photos_viewed": 6}) == pytest.approx(
        0.3 * 1.3 * 1.2 * 1.1, abs=1e-4
    )
    assert signal_strength("view", {"time_spent": 120, "scroll_depth": 80, "photos_viewed": 5}) == 0.3


@pytest.mark.parametrize("signal_type", list(BASE_STRENGTHS) + ["unknown"])
def test_signal_strength_is_capped(signal_type):
    strength = signal_strength(signal_type, {"time_spent": 999, "scroll_depth": 100, "photos_viewed": 40})
    assert 0 < strength <= 1.0


async def test_record_signal_appends_rows_with_snapshot(db, make_property, reinforcements):
    prop = make_property()
    db.add(prop)
    await db.flush()
    user_id = uuid.uuid4()

    data = {"time_spent": 200, "scroll_depth": 90, "photos_viewed": 2, "session_id": "s-1", "device_type": "mobile"}
    await signal_service.record_signal(db, user_id, prop.id, "save", data)
    await signal_service.record_signal(db, user_id, prop.id, "save", data)

    rows = (await db.execute(select(UserBehaviorSignal))).scalars().all()
    assert len(rows) == 2
    assert rows[0].id != rows[1].id
    assert rows[0].signal_strength == 1.0
    assert rows[0].property_snapshot["property_type"] == "villa"
    assert rows[0].device_type == "mobile"
    assert len(reinforcements) == 2
    assert reinforcements[0][2] == "save"


async def test_record_signal_without_listing_or_for_views(db, make_property, reinforcements):
    user_id = uuid.uuid4()
    await signal_service.record_signal(db, user_id, uuid.uuid4(), "inquiry", {})

    prop = make_property()
    db.add(prop)
    await db.flush()
    await signal_service.record_signal(db, user_id, prop.id, "view", None)

    rows = (await db.execute(select(UserBehaviorSignal))).scalars().all()
    assert len(rows) == 2
    assert reinforcements == []


async def test_update_preferences_upserts_one_row(db):
    user_id = uuid.uuid4()
    await signal_service.update_preferences(db, user_id, {"min_budget": 1_000, "preferred_locations": ["Ubud"]})
    await signal_service.update_preferences(db, user_id, {"max_budget": 5_000, "bogus": 1})

    rows = (await db.execute(select(UserPreferenceProfile))).scalars().all()
    assert len(rows) == 1
    await db.refresh(rows[0])
    assert rows[0].min_budget == 1_000
    assert rows[0].max_budget == 5_000
    assert rows[0].preferred_locations == ["Ubud"]


async def test_provide_feedback_updates_history_and_ignores_unknown_ids(db):
    history = RecommendationHistory(
        user_id=uuid.uuid4(),
        property_id=uuid.uuid4(),
        overall_score=80,
        preference_score=90,
        discovery_score=50,
    )
    db.add(history)
    await db.flush()

    await signal_service.provide_feedback(db, history.id, "helpful")
    await signal_service.provide_feedback(db, uuid.uuid4(), "helpful")

    await db.refresh(history)
    assert history.user_feedback == "helpful"
    assert history.feedback_at is not None
