"""Tests for weighted kit scoring"""
import pytest
from datetime import datetime

from app.engine.kits import Archetype, Kit
from app.engine.scoring import (
    KitFactors,
    calculate_kit_score,
    get_best_kit_recommendation,
    get_kit_recommendation,
    get_kit_recommendation_from_events,
    get_time_of_day,
)


class TestTimeOfDay:
    @pytest.mark.parametrize("hour,expected", [
        (6, "morning"), (10, "morning"),
        (11, "afternoon"), (16, "afternoon"),
        (17, "evening"), (21, "evening"),
        (22, "night"), (0, "night"), (5, "night"),
    ])
    def test_day_parts(self, hour, expected):
        assert get_time_of_day(hour) == expected


class TestCalculateKitScore:
    def test_post_workout_afternoon(self):
        factors = KitFactors(activity="hiit", time="14:00", hydration_gap=True, sweat_loss=600)

        # archetype 60 + afternoon 10 + gap 10 + sweat 10
        assert calculate_kit_score(Kit.WHITE_EMBER, factors) == 90
        # archetype 60 + sweat 10
        assert calculate_kit_score(Kit.COPPER_WHISPER, factors) == 70
        # afternoon 10 + gap 10
        assert calculate_kit_score(Kit.SILVER_MIRAGE, factors) == 20
        assert calculate_kit_score(Kit.NIGHT_SIGNAL, factors) == 0

    def test_mood_affinities(self):
        assert calculate_kit_score(Kit.GHOST_BLOOM, KitFactors(mood="low")) == 10
        assert calculate_kit_score(Kit.IRON_DRIFT, KitFactors(mood="tight")) == 10
        assert calculate_kit_score(Kit.COLD_HALO, KitFactors(mood="foggy")) == 10
        assert calculate_kit_score(Kit.COLD_HALO, KitFactors(mood="balanced")) == 0

    def test_sweat_loss_threshold_is_strict(self):
        assert calculate_kit_score(Kit.WHITE_EMBER, KitFactors(sweat_loss=500)) == 0
        assert calculate_kit_score(Kit.WHITE_EMBER, KitFactors(sweat_loss=501)) == 10

    def test_datetime_time_accepted(self):
        factors = KitFactors(time=datetime(2026, 3, 10, 23, 15))
        assert calculate_kit_score(Kit.BLACK_VEIL, factors) == 10

    def test_extended_activity_table(self):
        assert calculate_kit_score(Kit.GHOST_BLOOM, KitFactors(activity="cycle")) == 60
        assert calculate_kit_score(Kit.ECHO_SPIRAL, KitFactors(activity="dinner")) == 60

    def test_unparseable_time_ignored(self):
        assert calculate_kit_score(Kit.SKY_SALT, KitFactors(time="later")) == 0

    @pytest.mark.parametrize("kit", list(Kit))
    def test_score_bounded(self, kit):
        factors = KitFactors(activity="desk", time="13:00", hydration_gap=True, mood="foggy", sweat_loss=900)
        assert 0 <= calculate_kit_score(kit, factors) <= 100


class TestArchetypeAffinity:
    def test_post_sweat_cool(self):
        scores = get_kit_recommendation(Archetype.POST_SWEAT_COOL)

        assert scores[Kit.WHITE_EMBER] == 100
        assert scores[Kit.COPPER_WHISPER] == 100
        assert scores[Kit.SILVER_MIRAGE] == 40
        assert scores[Kit.IRON_DRIFT] == 40
        assert scores[Kit.SKY_SALT] == 20
        assert len(scores) == 11


class TestBestKit:
    def test_averages_across_events(self):
        events = [
            KitFactors(activity="hiit", time="14:00", hydration_gap=True),
            KitFactors(activity="sleep", time="23:00"),
        ]
        scores = get_kit_recommendation_from_events(events)

        assert scores[Kit.WHITE_EMBER] == 40  # (80 + 0) / 2
        assert scores[Kit.NIGHT_SIGNAL] == 35  # (0 + 70) / 2
        assert scores[Kit.COPPER_WHISPER] == 30
        assert get_best_kit_recommendation(events) == Kit.WHITE_EMBER

    def test_average_rounds_half_up(self):
        events = [KitFactors(time="08:00"), KitFactors(), KitFactors(), KitFactors()]
        scores = get_kit_recommendation_from_events(events)

        assert scores[Kit.SKY_SALT] == 3  # 10 / 4 = 2.5

    def test_tie_goes_to_first_kit_in_order(self):
        events = [KitFactors(activity="desk")]
        scores = get_kit_recommendation_from_events(events)

        assert scores[Kit.SILVER_MIRAGE] == scores[Kit.COLD_HALO] == 60
        assert get_best_kit_recommendation(events) == Kit.SILVER_MIRAGE

    def test_best_kit_has_max_score(self):
        events = [
            KitFactors(activity="run", time="07:00", sweat_loss=700),
            KitFactors(activity="zoom", time="12:30", hydration_gap=True, mood="foggy"),
            KitFactors(activity="brunch", time="11:00", mood="tight"),
        ]
        scores = get_kit_recommendation_from_events(events)
        best = get_best_kit_recommendation(events)

        assert scores[best] == max(scores.values())

    def test_deterministic(self):
        events = [KitFactors(activity="late_screen", time="22:30", mood="low")]
        results = {get_best_kit_recommendation(events) for _ in range(10)}
        assert results == {Kit.NIGHT_SIGNAL}

    def test_no_events_returns_fallback(self):
        assert get_best_kit_recommendation([]) == Kit.SKY_SALT

    def test_all_zero_returns_fallback(self):
        assert get_best_kit_recommendation([KitFactors()]) == Kit.SKY_SALT
