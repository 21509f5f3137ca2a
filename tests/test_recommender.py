"""Tests for the store-backed hydration engine"""
import pytest
from datetime import datetime, timedelta, timezone

from app.engine import HydrationEngine, UserNotFoundError, day_window
from app.models import HydrationSession


@pytest.fixture
def engine():
    return HydrationEngine()


class TestDayWindow:
    def test_naive_is_utc(self):
        start, end = day_window(datetime(2026, 3, 10, 18, 30))
        assert start == datetime(2026, 3, 10)
        assert end == datetime(2026, 3, 11)

    def test_aware_converted_to_utc(self):
        # 01:30 on the 11th at +05:00 is still the 10th in UTC
        now = datetime(2026, 3, 11, 1, 30, tzinfo=timezone(timedelta(hours=5)))
        start, end = day_window(now)
        assert start == datetime(2026, 3, 10)
        assert start.tzinfo is None


class TestHydrationEngine:
    def test_missing_user_raises(self, engine, db_session, reference_now):
        with pytest.raises(UserNotFoundError):
            engine.assess("missing-id", db_session, reference_now)

    def test_only_todays_events_count(self, engine, db_session, athletic_male, add_event, reference_now):
        add_event(athletic_male, "water", datetime(2026, 3, 9, 23, 59), amount=2000)
        add_event(athletic_male, "water", datetime(2026, 3, 10, 8, 0), amount=500)
        add_event(athletic_male, "water", datetime(2026, 3, 11, 0, 0), amount=2000)

        gap = engine.calculate_gap(athletic_male.id, db_session, reference_now)

        assert gap.total_water_input_ml == 500
        assert gap.hydration_gap_ml == pytest.approx(1285.0)
        assert gap.context.value == "severe"

    def test_session_rates_override_defaults(self, engine, db_session, athletic_male, reference_now):
        db_session.add(HydrationSession(
            user_id=athletic_male.id, start_time=datetime(2026, 3, 10, 7, 0), potassium_rate_mg_per_kg=80.0
        ))
        db_session.commit()

        targets = engine.assess(athletic_male.id, db_session, reference_now).targets

        assert targets.potassium_mg == pytest.approx(4760.0)
        assert targets.sodium_mg == pytest.approx(1487.5)

    def test_recommendation_for_desk_day(self, engine, db_session, athletic_male, add_event, reference_now):
        add_event(athletic_male, "water", datetime(2026, 3, 10, 8, 0), amount=500)

        result = engine.get_recommendation(athletic_male.id, db_session, reference_now)

        assert result["archetype"] == "mental_fog"
        assert [k["name"] for k in result["kits"]] == ["Silver Mirage", "Cold Halo"]
        assert result["best_kit"] == "Silver Mirage"

    def test_recommendation_after_workout(self, engine, db_session, athletic_male, add_event, reference_now):
        add_event(
            athletic_male, "workout", datetime(2026, 3, 10, 14, 0),
            activity="hiit", duration_minutes=45, pre_weight_kg=70.0, post_weight_kg=69.0
        )

        result = engine.get_recommendation(athletic_male.id, db_session, reference_now, mood="tight")

        assert result["archetype"] == "post_sweat_cool"
        assert result["kits"][0]["name"] == "White Ember"
        # 60 archetype + 10 afternoon + 10 gap + 10 sweat loss
        assert result["kit_scores"]["White Ember"] == 90
        assert result["best_kit"] == "White Ember"
        assert result["assessment"]["intake"]["latest_activity"]["intensity"] == "intense"

    def test_scoring_time_uses_utc_regardless_of_offset(self, engine, db_session, athletic_male):
        utc_now = datetime(2026, 3, 10, 7, 0, tzinfo=timezone.utc)
        offset_now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone(timedelta(hours=5)))

        from_utc = engine.get_recommendation(athletic_male.id, db_session, utc_now)
        from_offset = engine.get_recommendation(athletic_male.id, db_session, offset_now)

        assert from_utc["kit_scores"] == from_offset["kit_scores"]
        # 07:00 UTC is morning
        assert from_offset["kit_scores"]["Morning Flow"] == 10
        assert from_offset["kit_scores"]["Silver Mirage"] == 70
        assert from_offset["kit_scores"]["Echo Spiral"] == 0

    def test_session_from_previous_day_is_ignored(self, engine, db_session, athletic_male, reference_now):
        db_session.add(HydrationSession(
            user_id=athletic_male.id, start_time=datetime(2026, 3, 9, 20, 0), potassium_rate_mg_per_kg=80.0
        ))
        db_session.commit()

        assert engine.get_active_session(athletic_male.id, db_session, reference_now) is None
        targets = engine.assess(athletic_male.id, db_session, reference_now).targets
        assert targets.potassium_mg == pytest.approx(3391.5)
