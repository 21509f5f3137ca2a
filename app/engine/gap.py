"""
Hydration Gap Engine

Combines body composition, water loss and intake into a gap assessment,
plus per-nutrient targets (water, sodium, potassium, protein) scaled to
lean body mass.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from .body import (
    DEFAULT_WEIGHT_KG,
    BodyComposition,
    FoodItem,
    IntakeAggregate,
    Intensity,
    aggregate_intake,
    compute_body_composition,
    compute_water_loss,
    estimate_food_water,
    resolve_intensity,
)

logger = logging.getLogger(__name__)


WATER_ML_PER_KG_LBM = 30
DEFAULT_PROTEIN_RATE = 1.6  # g per kg LBM
DEFAULT_SODIUM_RATE = 25.0  # mg per kg LBM
DEFAULT_POTASSIUM_RATE = 57.0  # mg per kg LBM

# Strict greater-than thresholds on the gap (ml)
SEVERE_GAP_ML = 1000
MODERATE_GAP_ML = 500
MILD_GAP_ML = 200
EXCESS_GAP_ML = -200

SWEAT_ACTIVITIES = ("hiit", "hot_yoga", "run")


class HydrationContext(str, Enum):
    SEVERE = "severe"
    MODERATE = "moderate"
    MILD = "mild"
    OPTIMAL = "optimal"
    EXCESS = "excess"


DEFICIT_CONTEXTS = (HydrationContext.SEVERE, HydrationContext.MODERATE, HydrationContext.MILD)


class ActivityContext(str, Enum):
    BASELINE = "baseline"
    ACTIVE = "active"
    FASTING = "fasting"
    HIGH_SWEAT = "high_sweat"


@dataclass
class HydrationGapResult:
    hydration_gap_ml: float
    context: HydrationContext
    activity_context: ActivityContext
    lean_body_mass: float
    water_loss_ml: float
    water_from_food_ml: float
    total_water_input_ml: float
    recommended_intake_ml: float

    @property
    def has_gap(self) -> bool:
        """True when the context is a deficit (mild or worse)."""
        return self.context in DEFICIT_CONTEXTS

    def to_dict(self) -> dict:
        return {
            "hydration_gap_ml": self.hydration_gap_ml,
            "context": self.context.value,
            "activity_context": self.activity_context.value,
            "has_gap": self.has_gap,
            "lean_body_mass": self.lean_body_mass,
            "water_loss_ml": self.water_loss_ml,
            "water_from_food_ml": self.water_from_food_ml,
            "total_water_input_ml": self.total_water_input_ml,
            "recommended_intake_ml": self.recommended_intake_ml,
        }


@dataclass
class HydrationTargets:
    water_ml: float
    protein_g: float
    sodium_mg: float
    potassium_mg: float
    protein_rate: float
    sodium_rate: float
    potassium_rate: float

    def to_dict(self) -> dict:
        return {
            "water_ml": self.water_ml,
            "protein_g": self.protein_g,
            "sodium_mg": self.sodium_mg,
            "potassium_mg": self.potassium_mg,
            "rates": {
                "water_ml_per_kg": WATER_ML_PER_KG_LBM,
                "protein_g_per_kg": self.protein_rate,
                "sodium_mg_per_kg": self.sodium_rate,
                "potassium_mg_per_kg": self.potassium_rate,
            },
        }


@dataclass
class NutrientGaps:
    """Target minus intake; negative values are surpluses."""
    water_gap_ml: float
    sodium_gap_mg: float
    potassium_gap_mg: float
    protein_gap_g: float

    def to_dict(self) -> dict:
        return {
            "water_gap_ml": self.water_gap_ml,
            "sodium_gap_mg": self.sodium_gap_mg,
            "potassium_gap_mg": self.potassium_gap_mg,
            "protein_gap_g": self.protein_gap_g,
        }


@dataclass
class HydrationAssessment:
    """Everything computed for one user-day."""
    body: BodyComposition
    intake: IntakeAggregate
    gap: HydrationGapResult
    targets: HydrationTargets
    nutrient_gaps: NutrientGaps

    def to_dict(self) -> dict:
        return {
            "body": self.body.to_dict(),
            "intake": self.intake.to_dict(),
            "gap": self.gap.to_dict(),
            "targets": self.targets.to_dict(),
            "nutrient_gaps": self.nutrient_gaps.to_dict(),
        }


def classify_hydration_context(hydration_gap_ml: float) -> HydrationContext:
    if hydration_gap_ml > SEVERE_GAP_ML:
        return HydrationContext.SEVERE
    elif hydration_gap_ml > MODERATE_GAP_ML:
        return HydrationContext.MODERATE
    elif hydration_gap_ml > MILD_GAP_ML:
        return HydrationContext.MILD
    elif hydration_gap_ml < EXCESS_GAP_ML:
        return HydrationContext.EXCESS
    return HydrationContext.OPTIMAL


def classify_activity_context(activity: str, intensity=Intensity.MODERATE) -> ActivityContext:
    if activity in SWEAT_ACTIVITIES:
        if resolve_intensity(intensity) == Intensity.INTENSE:
            return ActivityContext.HIGH_SWEAT
        return ActivityContext.ACTIVE
    if activity == "fasting":
        return ActivityContext.FASTING
    return ActivityContext.BASELINE


def calculate_hydration_gap(
    weight: Optional[float],
    sex,
    body_type: Optional[str],
    activity_type: str,
    duration_minutes: float,
    intensity=Intensity.MODERATE,
    total_water_intake_ml: float = 0.0,
    food_intake: Optional[Iterable[FoodItem]] = None,
    sweat_loss_ml: Optional[float] = None,
    default_weight: float = DEFAULT_WEIGHT_KG
) -> HydrationGapResult:
    """
    Calculate the hydration gap for one period.

    recommended_intake = water_loss + water_from_food
    hydration_gap = recommended_intake - total_water_intake

    Args:
        weight: Body weight in kg
        sex: "male" or "female"
        body_type: Sex-specific body type
        activity_type: Latest activity (hiit, desk, ...)
        duration_minutes: Activity duration
        intensity: light, moderate or intense
        total_water_intake_ml: Water and electrolyte drinks consumed
        food_intake: Food items with amounts in grams
        sweat_loss_ml: Measured sweat loss, replaces the activity estimate

    Returns:
        HydrationGapResult with every intermediate value
    """
    body = compute_body_composition(weight, sex, body_type, default_weight)
    water_loss = compute_water_loss(
        body.lean_body_mass,
        activity_type,
        duration_minutes,
        intensity,
        sweat_loss_ml=sweat_loss_ml,
    )
    water_from_food = estimate_food_water(food_intake or [])

    if total_water_intake_ml is None or total_water_intake_ml < 0:
        logger.warning(f"Water intake {total_water_intake_ml!r} clamped to zero")
        total_water_intake_ml = 0.0

    recommended_intake = water_loss + water_from_food
    hydration_gap = recommended_intake - total_water_intake_ml

    return HydrationGapResult(
        hydration_gap_ml=hydration_gap,
        context=classify_hydration_context(hydration_gap),
        activity_context=classify_activity_context(activity_type, intensity),
        lean_body_mass=body.lean_body_mass,
        water_loss_ml=water_loss,
        water_from_food_ml=water_from_food,
        total_water_input_ml=float(total_water_intake_ml),
        recommended_intake_ml=recommended_intake,
    )


def compute_hydration_targets(
    lean_body_mass: float,
    protein_rate: Optional[float] = None,
    sodium_rate: Optional[float] = None,
    potassium_rate: Optional[float] = None
) -> HydrationTargets:
    """Daily nutrient goals per kg of lean body mass. None rates use the defaults."""
    protein_rate = DEFAULT_PROTEIN_RATE if protein_rate is None else protein_rate
    sodium_rate = DEFAULT_SODIUM_RATE if sodium_rate is None else sodium_rate
    potassium_rate = DEFAULT_POTASSIUM_RATE if potassium_rate is None else potassium_rate
    lbm = max(0.0, lean_body_mass)

    return HydrationTargets(
        water_ml=lbm * WATER_ML_PER_KG_LBM,
        protein_g=lbm * max(0.0, protein_rate),
        sodium_mg=lbm * max(0.0, sodium_rate),
        potassium_mg=lbm * max(0.0, potassium_rate),
        protein_rate=protein_rate,
        sodium_rate=sodium_rate,
        potassium_rate=potassium_rate,
    )


def compute_nutrient_gaps(
    targets: HydrationTargets,
    intake: IntakeAggregate,
    gap: HydrationGapResult
) -> NutrientGaps:
    return NutrientGaps(
        water_gap_ml=gap.hydration_gap_ml,
        sodium_gap_mg=targets.sodium_mg - intake.total_sodium_mg,
        potassium_gap_mg=targets.potassium_mg - intake.total_potassium_mg,
        protein_gap_g=targets.protein_g - intake.total_protein_g,
    )


def assess_hydration(
    profile: dict,
    events: Iterable,
    protein_rate: Optional[float] = None,
    sodium_rate: Optional[float] = None,
    potassium_rate: Optional[float] = None,
    default_weight: float = DEFAULT_WEIGHT_KG
) -> HydrationAssessment:
    """
    Run the full pipeline for a profile and a day's events.

    Args:
        profile: Dict with weight_kg, sex, body_type
        events: The day's events (IntakeRecord or ORM rows)
    """
    events: List = list(events)
    body = compute_body_composition(
        profile.get("weight_kg"), profile.get("sex"), profile.get("body_type"), default_weight
    )
    intake = aggregate_intake(events)
    activity = intake.latest_activity

    gap = calculate_hydration_gap(
        weight=body.weight_kg,
        sex=body.sex,
        body_type=body.body_type,
        activity_type=activity.activity,
        duration_minutes=activity.duration_minutes,
        intensity=activity.intensity,
        total_water_intake_ml=intake.total_water_intake_ml,
        food_intake=intake.food_intake,
        sweat_loss_ml=activity.sweat_loss_ml,
        default_weight=default_weight,
    )
    targets = compute_hydration_targets(
        body.lean_body_mass,
        protein_rate=protein_rate,
        sodium_rate=sodium_rate,
        potassium_rate=potassium_rate,
    )

    logger.debug(
        f"Assessed {len(events)} events: gap={gap.hydration_gap_ml:.0f}ml context={gap.context.value}"
    )

    return HydrationAssessment(
        body=body,
        intake=intake,
        gap=gap,
        targets=targets,
        nutrient_gaps=compute_nutrient_gaps(targets, intake, gap),
    )
