"""
Hydration Kits

Static archetype and kit reference data, the archetype rule table, and
kit lookup. Kits are pre-composed drink/ritual bundles handed out by
staff; each belongs to one or two archetypes.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

logger = logging.getLogger(__name__)


class Archetype(str, Enum):
    POST_SWEAT_COOL = "post_sweat_cool"
    MENTAL_FOG = "mental_fog"
    GUT_REBALANCE = "gut_rebalance"
    REST_RESET = "rest_reset"
    CLEAN_ENERGY = "clean_energy"
    DETOX_GENTLE = "detox_gentle"


class Kit(str, Enum):
    # Declaration order is the tie-break order for scoring
    WHITE_EMBER = "White Ember"
    COPPER_WHISPER = "Copper Whisper"
    SILVER_MIRAGE = "Silver Mirage"
    COLD_HALO = "Cold Halo"
    ECHO_SPIRAL = "Echo Spiral"
    IRON_DRIFT = "Iron Drift"
    NIGHT_SIGNAL = "Night Signal"
    BLACK_VEIL = "Black Veil"
    SKY_SALT = "Sky Salt"
    MORNING_FLOW = "Morning Flow"
    GHOST_BLOOM = "Ghost Bloom"


FALLBACK_KIT = Kit.SKY_SALT
DEFAULT_ARCHETYPE = Archetype.CLEAN_ENERGY


@dataclass
class KitInfo:
    """A kit with its display copy."""
    kit: Kit
    description: str
    rituals: List[str]

    @property
    def name(self) -> str:
        return self.kit.value

    @property
    def archetypes(self) -> List[Archetype]:
        return [a for a, kits in ARCHETYPE_TO_KITS.items() if self.kit in kits]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "rituals": list(self.rituals),
            "archetypes": [a.value for a in self.archetypes],
        }


# First kit in each list is the primary recommendation
ARCHETYPE_TO_KITS: Dict[Archetype, List[Kit]] = {
    Archetype.POST_SWEAT_COOL: [Kit.WHITE_EMBER, Kit.COPPER_WHISPER],
    Archetype.MENTAL_FOG: [Kit.SILVER_MIRAGE, Kit.COLD_HALO],
    Archetype.GUT_REBALANCE: [Kit.ECHO_SPIRAL, Kit.IRON_DRIFT],
    Archetype.REST_RESET: [Kit.NIGHT_SIGNAL, Kit.BLACK_VEIL],
    Archetype.CLEAN_ENERGY: [Kit.SKY_SALT, Kit.MORNING_FLOW],
    Archetype.DETOX_GENTLE: [Kit.GHOST_BLOOM, Kit.WHITE_EMBER],
}

# Evaluated in order; first match wins
ARCHETYPE_RULES: List[Tuple[FrozenSet[str], bool, Archetype]] = [
    (frozenset({"hiit", "hot_yoga", "run"}), True, Archetype.POST_SWEAT_COOL),
    (frozenset({"work_laptop", "zoom", "desk"}), True, Archetype.MENTAL_FOG),
    (frozenset({"brunch", "big_meal"}), False, Archetype.GUT_REBALANCE),
    (frozenset({"sleep", "late_screen"}), False, Archetype.REST_RESET),
    (frozenset({"meditation", "fasting"}), False, Archetype.CLEAN_ENERGY),
]


KIT_CATALOG: Dict[Kit, KitInfo] = {
    Kit.WHITE_EMBER: KitInfo(
        kit=Kit.WHITE_EMBER,
        description="Cooling post-workout recovery with electrolytes and a refreshing ritual",
        rituals=[
            "Apply cool stone to back of neck",
            "Offer electrolyte-infused water at 55°F",
            "Perform gentle wrist rotation technique",
            "Finish with deep breathing exercise",
        ],
    ),
    Kit.COPPER_WHISPER: KitInfo(
        kit=Kit.COPPER_WHISPER,
        description="Muscle recovery blend with forearm flush ritual and mineral replenishment",
        rituals=[
            "Begin with forearm flush technique",
            "Serve sparkling mineral water with electrolyte blend",
            "Apply pressure to key recovery points",
            "End with mineral-rich hydration shot",
        ],
    ),
    Kit.SILVER_MIRAGE: KitInfo(
        kit=Kit.SILVER_MIRAGE,
        description="Mental clarity boost with face and temple ritual for screen fatigue",
        rituals=[
            "Start with temple and face ritual",
            "Offer kombucha clarity blend",
            "Perform eye relief technique",
            "Finish with mental reset breathing",
        ],
    ),
    Kit.COLD_HALO: KitInfo(
        kit=Kit.COLD_HALO,
        description="Vocal clarity and quick cooling ritual with magnesium-rich hydration",
        rituals=[
            "Apply cooling stones to throat area",
            "Serve magnesium-rich water blend",
            "Perform quick cooling ritual",
            "End with vocal clarity exercise",
        ],
    ),
    Kit.ECHO_SPIRAL: KitInfo(
        kit=Kit.ECHO_SPIRAL,
        description="Heat-clearing ritual with digestive support and roundbody stroke technique",
        rituals=[
            "Begin with heat-clearing ritual",
            "Offer digestive kombucha blend",
            "Perform roundbody stroke technique",
            "Finish with centered breathing",
        ],
    ),
    Kit.IRON_DRIFT: KitInfo(
        kit=Kit.IRON_DRIFT,
        description="Post-workout recovery with kombucha for gut-brain connection and cold stroke",
        rituals=[
            "Start with cold stroke technique",
            "Serve kombucha with electrolytes",
            "Apply pressure to muscle recovery points",
            "End with grounding exercise",
        ],
    ),
    Kit.NIGHT_SIGNAL: KitInfo(
        kit=Kit.NIGHT_SIGNAL,
        description="Evening wind-down with chest stone ritual and chaga blend for restful sleep",
        rituals=[
            "Begin with chest stone placement",
            "Offer chaga wind-down blend",
            "Perform calming ritual sequence",
            "End with sleep preparation breathing",
        ],
    ),
    Kit.BLACK_VEIL: KitInfo(
        kit=Kit.BLACK_VEIL,
        description="Reset ritual with forearm technique and mineral-rich, sugar-free hydration",
        rituals=[
            "Start with forearm reset technique",
            "Serve mineral-rich, sugar-free blend",
            "Perform nervous system calming ritual",
            "Finish with centering exercise",
        ],
    ),
    Kit.SKY_SALT: KitInfo(
        kit=Kit.SKY_SALT,
        description="Mineral focus blend for all-day smooth energy without sugar crash",
        rituals=[
            "Begin with mineral focus ritual",
            "Offer balanced hydration blend",
            "Perform clarity technique",
            "End with energizing breathing",
        ],
    ),
    Kit.MORNING_FLOW: KitInfo(
        kit=Kit.MORNING_FLOW,
        description="Gentle awakening ritual with balanced hydration for mindful mornings",
        rituals=[
            "Start with gentle awakening ritual",
            "Serve balanced morning hydration",
            "Perform mindful technique sequence",
            "Finish with intention-setting",
        ],
    ),
    Kit.GHOST_BLOOM: KitInfo(
        kit=Kit.GHOST_BLOOM,
        description="Feminine-coded balance with hibiscus kombucha and stillness ritual",
        rituals=[
            "Begin with stillness ritual",
            "Offer hibiscus kombucha blend",
            "Perform feminine-coded balance technique",
            "End with gentle restoration breathing",
        ],
    ),
}


ARCHETYPE_DESCRIPTIONS: Dict[Archetype, str] = {
    Archetype.POST_SWEAT_COOL: "Recovery after intense physical activity with cooling and electrolyte replenishment",
    Archetype.MENTAL_FOG: "Mental clarity boost for screen fatigue and focus restoration",
    Archetype.GUT_REBALANCE: "Digestive support and rebalancing after meals or social events",
    Archetype.REST_RESET: "Evening wind-down and preparation for restful sleep",
    Archetype.CLEAN_ENERGY: "Balanced, sustained energy without stimulants",
    Archetype.DETOX_GENTLE: "Gentle cleansing and hormonal support",
}

ACTIVITY_DESCRIPTIONS: Dict[str, str] = {
    "hiit": "High-intensity interval training",
    "hot_yoga": "Hot yoga session",
    "run": "Running or jogging",
    "work_laptop": "Working on laptop",
    "zoom": "Video conferencing",
    "desk": "Desk work",
    "brunch": "Brunch or social meal",
    "big_meal": "Large meal",
    "sleep": "Sleep or rest",
    "late_screen": "Late night screen time",
    "meditation": "Meditation session",
    "fasting": "Fasting period",
    "cycle": "Menstrual cycle",
    "rest_day": "Rest or recovery day",
}

MOOD_DESCRIPTIONS: Dict[str, str] = {
    "low": "Low energy",
    "tight": "Muscle tightness",
    "foggy": "Mental fog",
    "energetic": "Energetic",
    "balanced": "Balanced",
    "stressed": "Stressed",
}


def get_hydration_archetype(
    activity: str,
    time: Optional[str] = None,
    hydration_gap: bool = False,
    mood: Optional[str] = None
) -> Archetype:
    """
    Map an activity onto an archetype using the ordered rule table.

    time and mood are accepted for API compatibility and do not affect
    the result; the weighted scorer in scoring.py uses them.
    """
    for activities, needs_gap, archetype in ARCHETYPE_RULES:
        if activity in activities and (hydration_gap or not needs_gap):
            return archetype
    return DEFAULT_ARCHETYPE


def get_archetype_kits(archetype: Archetype) -> List[KitInfo]:
    """Kits for an archetype, primary first."""
    return [KIT_CATALOG[kit] for kit in ARCHETYPE_TO_KITS.get(archetype, [])]


def get_hydration_kit(activity: str, hydration_gap: bool) -> Kit:
    """Primary kit for an activity, Sky Salt if the archetype has no kits."""
    archetype = get_hydration_archetype(activity, hydration_gap=hydration_gap)
    kits = ARCHETYPE_TO_KITS.get(archetype) or []
    if not kits:
        logger.warning(f"No kits mapped for archetype {archetype.value}, using {FALLBACK_KIT.value}")
        return FALLBACK_KIT
    return kits[0]


def get_kit_info(name: str) -> Optional[KitInfo]:
    """Look up a kit by display name ("Sky Salt") or enum name ("SKY_SALT")."""
    for kit, info in KIT_CATALOG.items():
        if name in (kit.value, kit.name):
            return info
    return None
