"""Tests for archetype rules and kit lookup"""
import pytest

from app.engine.kits import (
    ARCHETYPE_DESCRIPTIONS,
    ARCHETYPE_TO_KITS,
    KIT_CATALOG,
    Archetype,
    Kit,
    get_archetype_kits,
    get_hydration_archetype,
    get_hydration_kit,
    get_kit_info,
)


class TestArchetypeRules:
    @pytest.mark.parametrize("activity,gap,expected", [
        ("hiit", True, Archetype.POST_SWEAT_COOL),
        ("hot_yoga", True, Archetype.POST_SWEAT_COOL),
        ("run", True, Archetype.POST_SWEAT_COOL),
        ("work_laptop", True, Archetype.MENTAL_FOG),
        ("zoom", True, Archetype.MENTAL_FOG),
        ("desk", True, Archetype.MENTAL_FOG),
        ("brunch", False, Archetype.GUT_REBALANCE),
        ("big_meal", True, Archetype.GUT_REBALANCE),
        ("sleep", False, Archetype.REST_RESET),
        ("late_screen", True, Archetype.REST_RESET),
        ("meditation", False, Archetype.CLEAN_ENERGY),
        ("fasting", True, Archetype.CLEAN_ENERGY),
    ])
    def test_rule_table(self, activity, gap, expected):
        assert get_hydration_archetype(activity, hydration_gap=gap) == expected

    @pytest.mark.parametrize("activity", ["hiit", "run", "desk", "zoom"])
    def test_gap_required_rules_fall_through_without_gap(self, activity):
        assert get_hydration_archetype(activity, hydration_gap=False) == Archetype.CLEAN_ENERGY

    @pytest.mark.parametrize("mood", [None, "low", "tight", "foggy", "stressed"])
    @pytest.mark.parametrize("time", [None, "06:30", "13:00", "23:45"])
    def test_hiit_with_gap_ignores_time_and_mood(self, time, mood):
        assert get_hydration_archetype("hiit", time=time, hydration_gap=True, mood=mood) == Archetype.POST_SWEAT_COOL

    @pytest.mark.parametrize("gap", [True, False])
    @pytest.mark.parametrize("mood", [None, "foggy"])
    def test_unknown_activity_defaults_to_clean_energy(self, gap, mood):
        assert get_hydration_archetype("unknown_activity", "12:00", gap, mood) == Archetype.CLEAN_ENERGY

    def test_detox_gentle_not_reachable_from_rules(self):
        # cycle / rest_day only reach detox_gentle through the weighted scorer
        assert get_hydration_archetype("cycle", hydration_gap=True) == Archetype.CLEAN_ENERGY


class TestKitTables:
    @pytest.mark.parametrize("archetype", list(Archetype))
    def test_every_archetype_has_kits(self, archetype):
        kits = ARCHETYPE_TO_KITS[archetype]
        assert 1 <= len(kits) <= 2
        assert archetype in ARCHETYPE_DESCRIPTIONS

    def test_every_kit_in_one_or_two_archetypes(self):
        for kit in Kit:
            memberships = [a for a, kits in ARCHETYPE_TO_KITS.items() if kit in kits]
            assert 1 <= len(memberships) <= 2, kit

    def test_white_ember_in_two_archetypes(self):
        assert KIT_CATALOG[Kit.WHITE_EMBER].archetypes == [Archetype.POST_SWEAT_COOL, Archetype.DETOX_GENTLE]

    def test_catalog_complete(self):
        assert set(KIT_CATALOG) == set(Kit)
        assert len(Kit) == 11
        for info in KIT_CATALOG.values():
            assert info.description
            assert len(info.rituals) == 4

    def test_archetype_kits_are_ordered(self):
        kits = get_archetype_kits(Archetype.REST_RESET)
        assert [k.name for k in kits] == ["Night Signal", "Black Veil"]


class TestGetHydrationKit:
    @pytest.mark.parametrize("activity,gap,expected", [
        ("hiit", True, Kit.WHITE_EMBER),
        ("desk", True, Kit.SILVER_MIRAGE),
        ("brunch", False, Kit.ECHO_SPIRAL),
        ("sleep", False, Kit.NIGHT_SIGNAL),
        ("meditation", False, Kit.SKY_SALT),
        ("unknown_activity", True, Kit.SKY_SALT),
    ])
    def test_primary_kit(self, activity, gap, expected):
        assert get_hydration_kit(activity, gap) == expected

    @pytest.mark.parametrize("activity", ["hiit", "desk", "brunch", "sleep", "fasting", "nothing"])
    @pytest.mark.parametrize("gap", [True, False])
    def test_never_none(self, activity, gap):
        assert isinstance(get_hydration_kit(activity, gap), Kit)

    def test_empty_archetype_falls_back_to_sky_salt(self, monkeypatch):
        monkeypatch.setitem(ARCHETYPE_TO_KITS, Archetype.POST_SWEAT_COOL, [])
        assert get_hydration_kit("hiit", True) == Kit.SKY_SALT


class TestKitInfo:
    def test_lookup_by_display_name(self):
        assert get_kit_info("Sky Salt").kit == Kit.SKY_SALT

    def test_lookup_by_enum_name(self):
        assert get_kit_info("COLD_HALO").kit == Kit.COLD_HALO

    def test_unknown(self):
        assert get_kit_info("Blue Lagoon") is None

    def test_to_dict(self):
        data = KIT_CATALOG[Kit.GHOST_BLOOM].to_dict()
        assert data["name"] == "Ghost Bloom"
        assert data["archetypes"] == ["detox_gentle"]
