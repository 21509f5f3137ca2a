"""
Weighted Kit Scoring

Additive 0-100 scoring used when several timeline events have to be
reconciled into a single kit recommendation.
"""

import math
from dataclasses import dataclass
from datetime import datetime, time as dt_time
from typing import Dict, List, Optional, Union

from .kits import ARCHETYPE_TO_KITS, FALLBACK_KIT, Archetype, Kit

MAX_SCORE = 100
ARCHETYPE_MATCH_POINTS = 60
BONUS_POINTS = 10
SWEAT_LOSS_THRESHOLD_ML = 500

# Wider than the archetype rule table: every activity the timeline knows about
ACTIVITY_TO_ARCHETYPE: Dict[str, Archetype] = {
    # Post-sweat
    "hiit": Archetype.POST_SWEAT_COOL,
    "hot_yoga": Archetype.POST_SWEAT_COOL,
    "run": Archetype.POST_SWEAT_COOL,
    "gym": Archetype.POST_SWEAT_COOL,

    # Mental fog
    "work_laptop": Archetype.MENTAL_FOG,
    "zoom": Archetype.MENTAL_FOG,
    "desk": Archetype.MENTAL_FOG,
    "coding": Archetype.MENTAL_FOG,

    # Gut rebalance
    "brunch": Archetype.GUT_REBALANCE,
    "big_meal": Archetype.GUT_REBALANCE,
    "dinner": Archetype.GUT_REBALANCE,
    "social": Archetype.GUT_REBALANCE,

    # Rest reset
    "sleep": Archetype.REST_RESET,
    "late_screen": Archetype.REST_RESET,
    "evening": Archetype.REST_RESET,

    # Clean energy
    "meditation": Archetype.CLEAN_ENERGY,
    "fasting": Archetype.CLEAN_ENERGY,
    "morning": Archetype.CLEAN_ENERGY,

    # Detox gentle
    "cycle": Archetype.DETOX_GENTLE,
    "rest_day": Archetype.DETOX_GENTLE,
    "recovery": Archetype.DETOX_GENTLE,
}

TIME_OF_DAY_KITS: Dict[str, List[Kit]] = {
    "morning": [Kit.MORNING_FLOW, Kit.SKY_SALT],  # 6-11
    "afternoon": [Kit.WHITE_EMBER, Kit.SILVER_MIRAGE, Kit.ECHO_SPIRAL],  # 11-17
    "evening": [Kit.COPPER_WHISPER, Kit.IRON_DRIFT],  # 17-22
    "night": [Kit.NIGHT_SIGNAL, Kit.BLACK_VEIL],  # 22-6
}

HYDRATION_GAP_KITS = [Kit.WHITE_EMBER, Kit.SILVER_MIRAGE]
SWEAT_LOSS_KITS = [Kit.WHITE_EMBER, Kit.COPPER_WHISPER]

MOOD_KITS: Dict[str, List[Kit]] = {
    "low": [Kit.GHOST_BLOOM, Kit.SKY_SALT],
    "tight": [Kit.COPPER_WHISPER, Kit.IRON_DRIFT],
    "foggy": [Kit.SILVER_MIRAGE, Kit.COLD_HALO],
}

# Secondary (complementary) kit per archetype for affinity tables
COMPLEMENTARY_KITS: Dict[Archetype, List[Kit]] = {
    Archetype.POST_SWEAT_COOL: [Kit.SILVER_MIRAGE, Kit.IRON_DRIFT],
    Archetype.MENTAL_FOG: [Kit.SKY_SALT, Kit.MORNING_FLOW],
    Archetype.GUT_REBALANCE: [Kit.GHOST_BLOOM],
    Archetype.REST_RESET: [Kit.GHOST_BLOOM],
    Archetype.CLEAN_ENERGY: [Kit.COLD_HALO],
    Archetype.DETOX_GENTLE: [Kit.ECHO_SPIRAL],
}


@dataclass
class KitFactors:
    """One timeline event's inputs to the scorer."""
    activity: Optional[str] = None
    time: Optional[Union[str, datetime, dt_time]] = None  # "HH:MM" or a time/datetime
    hydration_gap: bool = False
    mood: Optional[str] = None
    sweat_loss: Optional[float] = None  # ml


def _hour_of(value: Union[str, datetime, dt_time]) -> Optional[int]:
    if isinstance(value, (datetime, dt_time)):
        return value.hour
    try:
        return int(str(value).split(":")[0])
    except (ValueError, IndexError):
        return None


def get_time_of_day(hour: int) -> str:
    """
    Day part for an hour (0-23).

    morning 6-11, afternoon 11-17, evening 17-22, night 22-6
    """
    if 6 <= hour < 11:
        return "morning"
    elif 11 <= hour < 17:
        return "afternoon"
    elif 17 <= hour < 22:
        return "evening"
    return "night"


def calculate_kit_score(kit: Kit, factors: KitFactors) -> int:
    """Score a kit (0-100) against one event's factors."""
    score = 0

    archetype = ACTIVITY_TO_ARCHETYPE.get(factors.activity) if factors.activity else None
    if archetype is not None and kit in ARCHETYPE_TO_KITS.get(archetype, []):
        score += ARCHETYPE_MATCH_POINTS

    if factors.time is not None:
        hour = _hour_of(factors.time)
        if hour is not None and kit in TIME_OF_DAY_KITS[get_time_of_day(hour)]:
            score += BONUS_POINTS

    if factors.hydration_gap and kit in HYDRATION_GAP_KITS:
        score += BONUS_POINTS

    if factors.mood and kit in MOOD_KITS.get(factors.mood, []):
        score += BONUS_POINTS

    if factors.sweat_loss and factors.sweat_loss > SWEAT_LOSS_THRESHOLD_ML and kit in SWEAT_LOSS_KITS:
        score += BONUS_POINTS

    return max(0, min(score, MAX_SCORE))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def get_kit_recommendation(archetype: Archetype) -> Dict[Kit, int]:
    """Affinity of every kit to an archetype: 100 primary, 40 complementary, 20 otherwise."""
    result = {}
    for kit in Kit:
        if kit in ARCHETYPE_TO_KITS.get(archetype, []):
            result[kit] = 100
        elif kit in COMPLEMENTARY_KITS.get(archetype, []):
            result[kit] = 40
        else:
            result[kit] = 20
    return result


def get_kit_recommendation_from_events(events: List[KitFactors]) -> Dict[Kit, int]:
    """Average each kit's score across events, rounded half up."""
    if not events:
        return {kit: 0 for kit in Kit}

    result = {}
    for kit in Kit:
        total = sum(calculate_kit_score(kit, event) for event in events)
        result[kit] = _round_half_up(total / len(events))
    return result


def get_best_kit_recommendation(events: List[KitFactors]) -> Kit:
    """
    Highest averaged score wins; ties go to the earliest kit in Kit order.

    With no events, or all scores zero, the fallback kit is returned.
    """
    scores = get_kit_recommendation_from_events(events)

    best_kit = FALLBACK_KIT
    highest = 0
    for kit, score in scores.items():
        if score > highest:
            highest = score
            best_kit = kit
    return best_kit
