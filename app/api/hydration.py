from typing import Dict, List, Optional
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel

from app.db import get_db
from app.engine import UserNotFoundError, hydration_engine, hydration_coach

router = APIRouter()


class HydrationGapResponse(BaseModel):
    user_id: str
    hydration_gap_ml: float
    context: str
    activity_context: str
    has_gap: bool
    lean_body_mass: float
    water_loss_ml: float
    water_from_food_ml: float
    total_water_input_ml: float
    recommended_intake_ml: float


class NutrientRates(BaseModel):
    water_ml_per_kg: float
    protein_g_per_kg: float
    sodium_mg_per_kg: float
    potassium_mg_per_kg: float


class HydrationTargetsResponse(BaseModel):
    water_ml: float
    protein_g: float
    sodium_mg: float
    potassium_mg: float
    rates: NutrientRates


class NutrientGapsResponse(BaseModel):
    water_gap_ml: float
    sodium_gap_mg: float
    potassium_gap_mg: float
    protein_gap_g: float


class TargetsResponse(BaseModel):
    user_id: str
    lean_body_mass: float
    targets: HydrationTargetsResponse
    nutrient_gaps: NutrientGapsResponse


class KitResponse(BaseModel):
    name: str
    description: str
    rituals: List[str]
    archetypes: List[str]


class RecommendationResponse(BaseModel):
    user_id: str
    assessment: dict
    archetype: str
    archetype_description: str
    kits: List[KitResponse]
    best_kit: str
    kit_scores: Dict[str, int]


class CoachResponse(BaseModel):
    id: str
    user_id: str
    message: str
    source: str
    best_kit: str
    context: str
    created_at: Optional[str]


class CoachHistoryItem(BaseModel):
    id: str
    session_id: Optional[str]
    message: str
    source: str
    best_kit: str
    archetype: Optional[str]
    context: Optional[str]
    hydration_gap_ml: Optional[float]
    created_at: Optional[str]


def _resolve_now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


@router.get("/{user_id}/gap", response_model=HydrationGapResponse)
def get_hydration_gap(
    user_id: str,
    now: Optional[datetime] = None,
    db: Session = Depends(get_db)
):
    """
    Hydration gap for the user's current UTC day.

    Args:
        user_id: The user's ID
        now: Optional reference time (defaults to the current time)
    """
    try:
        gap = hydration_engine.calculate_gap(user_id, db, _resolve_now(now))
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")

    return HydrationGapResponse(user_id=user_id, **gap.to_dict())


@router.get("/{user_id}/targets", response_model=TargetsResponse)
def get_hydration_targets(
    user_id: str,
    now: Optional[datetime] = None,
    db: Session = Depends(get_db)
):
    """Daily water, sodium, potassium and protein targets with today's gaps."""
    try:
        assessment = hydration_engine.assess(user_id, db, _resolve_now(now))
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")

    return TargetsResponse(
        user_id=user_id,
        lean_body_mass=assessment.body.lean_body_mass,
        targets=HydrationTargetsResponse(**assessment.targets.to_dict()),
        nutrient_gaps=NutrientGapsResponse(**assessment.nutrient_gaps.to_dict()),
    )


@router.get("/{user_id}/recommendation", response_model=RecommendationResponse)
def get_recommendation(
    user_id: str,
    now: Optional[datetime] = None,
    mood: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Archetype and ordered kit list for the user's day."""
    try:
        result = hydration_engine.get_recommendation(user_id, db, _resolve_now(now), mood=mood)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")

    return RecommendationResponse(**result)


@router.get("/{user_id}/coach", response_model=CoachResponse)
async def get_coach_message(
    user_id: str,
    now: Optional[datetime] = None,
    mood: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Coaching message written from the user's recommendation.

    The message is saved to the user's coach history, attached to the
    day's active session if there is one.
    """
    now = _resolve_now(now)
    try:
        result = hydration_engine.get_recommendation(user_id, db, now, mood=mood)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")

    reply = await hydration_coach.generate_message(result)
    session = hydration_engine.get_active_session(user_id, db, now)
    record = hydration_coach.save_message(db, result, reply, session_id=session.id if session else None)

    return CoachResponse(
        id=record.id,
        user_id=user_id,
        message=record.message,
        source=record.source,
        best_kit=record.best_kit,
        context=record.context,
        created_at=record.created_at.isoformat() if record.created_at else None,
    )


@router.get("/{user_id}/coach/history", response_model=List[CoachHistoryItem])
def get_coach_history(user_id: str, limit: int = 20, db: Session = Depends(get_db)):
    """Saved coaching messages, newest first."""
    try:
        hydration_engine.get_user(user_id, db)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")

    messages = hydration_coach.get_history(db, user_id, limit=limit)
    return [CoachHistoryItem(**m.to_dict()) for m in messages]
