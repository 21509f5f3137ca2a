"""
Body & Intake Model

Turns a user's body profile and a day's logged events into the normalized
quantities the gap engine works with: lean body mass, water loss, intake
totals and the day's latest activity.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


DEFAULT_WEIGHT_KG = 70.0


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


class Intensity(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    INTENSE = "intense"


class EventType(str, Enum):
    WATER = "water"
    ELECTROLYTE = "electrolyte"
    PROTEIN = "protein"
    WORKOUT = "workout"
    FOOD = "food"


# Body fat fraction by sex and body type
BODY_FAT_PERCENTAGES: Dict[Sex, Dict[str, float]] = {
    Sex.MALE: {
        "muscular": 0.10,
        "athletic": 0.15,
        "stocky": 0.20,
    },
    Sex.FEMALE: {
        "toned": 0.18,
        "athletic_female": 0.22,
        "curvy": 0.26,
    },
}

DEFAULT_BODY_TYPES: Dict[Sex, str] = {
    Sex.MALE: "athletic",
    Sex.FEMALE: "athletic_female",
}

# Pre-split profiles stored low/average/high; they resolve to the sex default
LEGACY_BODY_TYPES = ("low", "average", "high")

# Baseline daily loss: 3% of lean body mass (kg -> ml), i.e. 30 ml per kg LBM
BASE_WATER_LOSS_FRACTION = 0.03

# Water loss rates by activity (ml per minute)
ACTIVITY_WATER_LOSS: Dict[str, float] = {
    # Sedentary
    "desk": 0.5,
    "work_laptop": 0.5,
    "zoom": 0.6,
    "sleep": 0.4,
    "rest_day": 0.5,
    "meditation": 0.5,
    "late_screen": 0.5,

    # Light
    "brunch": 0.7,
    "big_meal": 0.8,
    "cycle": 2.0,

    # Moderate to intense
    "run": 8.0,
    "hiit": 12.0,
    "hot_yoga": 10.0,
}

DEFAULT_ACTIVITY = "desk"
DEFAULT_ACTIVITY_MINUTES = 240

INTENSITY_MULTIPLIERS: Dict[Intensity, float] = {
    Intensity.LIGHT: 0.7,
    Intensity.MODERATE: 1.0,
    Intensity.INTENSE: 1.5,
}

# Sweat loss (ml) above which a workout is treated as the given intensity
INTENSE_SWEAT_ML = 800
MODERATE_SWEAT_ML = 400

# Fraction of food mass that is water (1 g ~ 1 ml)
FOOD_WATER_CONTENT: Dict[str, float] = {
    "fruits": 0.85,
    "vegetables": 0.90,
    "soup": 0.92,
    "yogurt": 0.85,
    "rice": 0.70,
    "pasta": 0.65,
    "bread": 0.35,
    "meat": 0.60,
    "fish": 0.70,
    "eggs": 0.75,
}
DEFAULT_FOOD_WATER_CONTENT = 0.5


@dataclass
class BodyComposition:
    weight_kg: float
    sex: Sex
    body_type: str
    body_fat_percentage: float
    lean_body_mass: float

    def to_dict(self) -> dict:
        return {
            "weight_kg": self.weight_kg,
            "sex": self.sex.value,
            "body_type": self.body_type,
            "body_fat_percentage": self.body_fat_percentage,
            "lean_body_mass": self.lean_body_mass,
        }


@dataclass
class FoodItem:
    food: str
    amount: float  # grams


@dataclass
class IntakeRecord:
    """Engine-side view of a logged event, independent of the storage layer."""
    event_type: EventType
    timestamp: datetime
    amount: float = 0.0
    food: Optional[str] = None
    sodium_mg: Optional[float] = None
    potassium_mg: Optional[float] = None
    protein_g: Optional[float] = None
    activity: Optional[str] = None
    duration_minutes: Optional[int] = None
    intensity: Optional[str] = None
    pre_weight_kg: Optional[float] = None
    post_weight_kg: Optional[float] = None

    @classmethod
    def from_record(cls, record) -> "IntakeRecord":
        """Build from any object exposing the event columns (e.g. an ORM row)."""
        if isinstance(record, cls):
            return record
        return cls(
            event_type=EventType(record.event_type),
            timestamp=record.timestamp,
            amount=record.amount or 0.0,
            food=record.food,
            sodium_mg=record.sodium_mg,
            potassium_mg=record.potassium_mg,
            protein_g=record.protein_g,
            activity=record.activity,
            duration_minutes=record.duration_minutes,
            intensity=record.intensity,
            pre_weight_kg=record.pre_weight_kg,
            post_weight_kg=record.post_weight_kg,
        )

    @property
    def raw_sweat_loss_ml(self) -> Optional[float]:
        if self.pre_weight_kg is None or self.post_weight_kg is None:
            return None
        return (self.pre_weight_kg - self.post_weight_kg) * 1000

    @property
    def sweat_loss_ml(self) -> Optional[float]:
        """Weigh-in sweat loss, never negative."""
        raw = self.raw_sweat_loss_ml
        if raw is None:
            return None
        return max(0.0, raw)

    @property
    def sweat_loss_anomalous(self) -> bool:
        raw = self.raw_sweat_loss_ml
        return raw is not None and raw < 0


@dataclass
class ActivitySummary:
    activity: str
    duration_minutes: int
    intensity: Intensity
    sweat_loss_ml: Optional[float] = None
    synthesized: bool = False

    def to_dict(self) -> dict:
        return {
            "activity": self.activity,
            "duration_minutes": self.duration_minutes,
            "intensity": self.intensity.value,
            "sweat_loss_ml": self.sweat_loss_ml,
            "synthesized": self.synthesized,
        }


@dataclass
class IntakeAggregate:
    total_water_intake_ml: float
    food_intake: List[FoodItem]
    total_food_water_equivalent_ml: float
    latest_activity: ActivitySummary
    total_sodium_mg: float = 0.0
    total_potassium_mg: float = 0.0
    total_protein_g: float = 0.0
    anomalies: List[str] = field(default_factory=list)

    @property
    def activity_duration_min(self) -> int:
        return self.latest_activity.duration_minutes

    @property
    def activity_intensity(self) -> Intensity:
        return self.latest_activity.intensity

    def to_dict(self) -> dict:
        return {
            "total_water_intake_ml": self.total_water_intake_ml,
            "food_intake": [{"food": f.food, "amount": f.amount} for f in self.food_intake],
            "total_food_water_equivalent_ml": self.total_food_water_equivalent_ml,
            "latest_activity": self.latest_activity.to_dict(),
            "total_sodium_mg": self.total_sodium_mg,
            "total_potassium_mg": self.total_potassium_mg,
            "total_protein_g": self.total_protein_g,
            "anomalies": self.anomalies,
        }


def resolve_weight(weight: Optional[float], default: float = DEFAULT_WEIGHT_KG) -> float:
    """Return a usable weight, substituting the default for missing or non-positive values."""
    if weight is None or weight <= 0:
        logger.warning(f"Weight {weight!r} is missing or non-positive, using default {default} kg")
        return default
    return float(weight)


def resolve_sex(sex) -> Sex:
    if isinstance(sex, Sex):
        return sex
    try:
        return Sex(str(sex).lower())
    except ValueError:
        logger.warning(f"Unknown sex {sex!r}, using male body-fat table")
        return Sex.MALE


def resolve_body_type(sex, body_type: Optional[str]) -> str:
    """
    Map a stored body type onto one valid for the given sex.

    Female "athletic" is accepted as shorthand for "athletic_female".
    Legacy and unrecognized values resolve to the sex's default entry.
    """
    sex = resolve_sex(sex)
    table = BODY_FAT_PERCENTAGES[sex]
    default = DEFAULT_BODY_TYPES[sex]

    if body_type is None:
        return default

    normalized = str(body_type).strip().lower()
    if sex == Sex.FEMALE and normalized == "athletic":
        return "athletic_female"
    if normalized in table:
        return normalized

    if normalized in LEGACY_BODY_TYPES:
        logger.debug(f"Legacy body type {body_type!r} resolved to {default}")
    else:
        logger.warning(f"Body type {body_type!r} not valid for {sex.value}, using {default}")
    return default


def resolve_intensity(intensity) -> Intensity:
    if isinstance(intensity, Intensity):
        return intensity
    try:
        return Intensity(str(intensity).lower())
    except ValueError:
        logger.warning(f"Unknown intensity {intensity!r}, using moderate")
        return Intensity.MODERATE


def compute_body_composition(
    weight: Optional[float],
    sex,
    body_type: Optional[str],
    default_weight: float = DEFAULT_WEIGHT_KG
) -> BodyComposition:
    """
    Look up body fat for (sex, body type) and derive lean body mass.

    Args:
        weight: Body weight in kg; missing or non-positive uses default_weight
        sex: "male" or "female"
        body_type: Sex-specific body type; unknown values use the sex default
        default_weight: Weight substituted for unusable values

    Returns:
        BodyComposition with body_fat_percentage and lean_body_mass
    """
    weight_kg = resolve_weight(weight, default_weight)
    resolved_sex = resolve_sex(sex)
    resolved_type = resolve_body_type(resolved_sex, body_type)
    body_fat = BODY_FAT_PERCENTAGES[resolved_sex][resolved_type]

    return BodyComposition(
        weight_kg=weight_kg,
        sex=resolved_sex,
        body_type=resolved_type,
        body_fat_percentage=body_fat,
        lean_body_mass=weight_kg * (1 - body_fat),
    )


def infer_intensity(sweat_loss_ml: Optional[float]) -> Intensity:
    """Classify workout intensity from weigh-in sweat loss."""
    if sweat_loss_ml is None:
        return Intensity.MODERATE
    if sweat_loss_ml > INTENSE_SWEAT_ML:
        return Intensity.INTENSE
    if sweat_loss_ml > MODERATE_SWEAT_ML:
        return Intensity.MODERATE
    return Intensity.LIGHT


def default_activity() -> ActivitySummary:
    return ActivitySummary(
        activity=DEFAULT_ACTIVITY,
        duration_minutes=DEFAULT_ACTIVITY_MINUTES,
        intensity=Intensity.MODERATE,
        synthesized=True,
    )


def _non_negative(value: Optional[float], label: str, anomalies: List[str]) -> float:
    if value is None:
        return 0.0
    if value < 0:
        logger.warning(f"Negative {label} ({value}) clamped to zero")
        anomalies.append(f"negative_{label}")
        return 0.0
    return float(value)


def estimate_food_water(food_intake: Iterable[FoodItem]) -> float:
    """Water carried by food, using per-category water content."""
    total = 0.0
    for item in food_intake:
        content = FOOD_WATER_CONTENT.get(item.food, DEFAULT_FOOD_WATER_CONTENT)
        total += max(0.0, item.amount) * content
    return total


def aggregate_intake(events: Iterable) -> IntakeAggregate:
    """
    Summarize one period's events.

    Water and electrolyte amounts sum into total water intake. Food events
    with a food category are collected separately. The most recent workout
    becomes the latest activity; without one, a desk-work day is assumed.
    """
    anomalies: List[str] = []
    total_water = 0.0
    sodium = 0.0
    potassium = 0.0
    protein = 0.0
    food_intake: List[FoodItem] = []
    latest_workout: Optional[IntakeRecord] = None

    for raw in events:
        event = IntakeRecord.from_record(raw)
        amount = _non_negative(event.amount, f"{event.event_type.value}_amount", anomalies)

        if event.event_type in (EventType.WATER, EventType.ELECTROLYTE):
            total_water += amount
        elif event.event_type == EventType.PROTEIN:
            protein += amount
        elif event.event_type == EventType.FOOD and event.food:
            food_intake.append(FoodItem(food=event.food, amount=amount))
        elif event.event_type == EventType.WORKOUT:
            if latest_workout is None or event.timestamp >= latest_workout.timestamp:
                latest_workout = event

        sodium += _non_negative(event.sodium_mg, "sodium", anomalies)
        potassium += _non_negative(event.potassium_mg, "potassium", anomalies)
        if event.event_type != EventType.PROTEIN:
            protein += _non_negative(event.protein_g, "protein", anomalies)

    if latest_workout is None:
        activity = default_activity()
    else:
        if latest_workout.sweat_loss_anomalous:
            logger.warning(
                f"Post-workout weight exceeds pre-workout weight "
                f"({latest_workout.pre_weight_kg} -> {latest_workout.post_weight_kg}), sweat loss set to zero"
            )
            anomalies.append("negative_sweat_loss")

        sweat_loss = latest_workout.sweat_loss_ml
        if latest_workout.intensity:
            intensity = resolve_intensity(latest_workout.intensity)
        else:
            intensity = infer_intensity(sweat_loss)

        activity = ActivitySummary(
            activity=latest_workout.activity or DEFAULT_ACTIVITY,
            duration_minutes=max(0, latest_workout.duration_minutes or 0),
            intensity=intensity,
            sweat_loss_ml=sweat_loss,
        )

    return IntakeAggregate(
        total_water_intake_ml=total_water,
        food_intake=food_intake,
        total_food_water_equivalent_ml=estimate_food_water(food_intake),
        latest_activity=activity,
        total_sodium_mg=sodium,
        total_potassium_mg=potassium,
        total_protein_g=protein,
        anomalies=anomalies,
    )


def compute_water_loss(
    lean_body_mass: float,
    activity: str,
    duration_minutes: float,
    intensity=Intensity.MODERATE,
    sweat_loss_ml: Optional[float] = None
) -> float:
    """
    Estimate the day's water loss in ml.

    Baseline is 3% of lean body mass. Activity adds the portion of its
    per-minute rate above desk work, scaled by duration and intensity.
    A weigh-in sweat loss, when available, replaces that estimate.
    """
    baseline = max(0.0, lean_body_mass) * BASE_WATER_LOSS_FRACTION * 1000

    if sweat_loss_ml is not None:
        return baseline + max(0.0, sweat_loss_ml)

    desk_rate = ACTIVITY_WATER_LOSS[DEFAULT_ACTIVITY]
    rate = ACTIVITY_WATER_LOSS.get(activity, desk_rate)
    multiplier = INTENSITY_MULTIPLIERS[resolve_intensity(intensity)]
    activity_loss = max(0.0, rate - desk_rate) * max(0.0, duration_minutes or 0) * multiplier

    return baseline + activity_loss
