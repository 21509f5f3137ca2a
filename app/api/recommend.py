from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from app.engine.kits import (
    ACTIVITY_DESCRIPTIONS,
    ARCHETYPE_DESCRIPTIONS,
    ARCHETYPE_TO_KITS,
    MOOD_DESCRIPTIONS,
    Archetype,
    get_archetype_kits,
    get_hydration_archetype,
    get_hydration_kit,
)
from app.engine.scoring import (
    ACTIVITY_TO_ARCHETYPE,
    KitFactors,
    get_best_kit_recommendation,
    get_kit_recommendation,
    get_kit_recommendation_from_events,
)

router = APIRouter()


class RecommendRequest(BaseModel):
    activity: str
    time: Optional[str] = None  # "HH:MM"
    hydration_gap: bool = False
    mood: Optional[str] = None


class RecommendResponse(BaseModel):
    archetype: str
    description: str
    activity_description: Optional[str]
    kits: List[str]
    primary_kit: str


class FactorEvent(BaseModel):
    activity: Optional[str] = None
    time: Optional[str] = None
    hydration_gap: bool = False
    mood: Optional[str] = None
    sweat_loss: Optional[float] = None


class BestKitRequest(BaseModel):
    events: List[FactorEvent]


class BestKitResponse(BaseModel):
    best_kit: str
    scores: Dict[str, int]


@router.post("", response_model=RecommendResponse)
def recommend(request: RecommendRequest):
    """Map an activity/mood pair onto an archetype and its kits."""
    archetype = get_hydration_archetype(
        request.activity,
        time=request.time,
        hydration_gap=request.hydration_gap,
        mood=request.mood
    )
    return RecommendResponse(
        archetype=archetype.value,
        description=ARCHETYPE_DESCRIPTIONS[archetype],
        activity_description=ACTIVITY_DESCRIPTIONS.get(request.activity),
        kits=[k.name for k in get_archetype_kits(archetype)],
        primary_kit=get_hydration_kit(request.activity, request.hydration_gap).value,
    )


@router.post("/best-kit", response_model=BestKitResponse)
def best_kit(request: BestKitRequest):
    """Reconcile several timeline events into one kit using averaged scores."""
    if not request.events:
        raise HTTPException(status_code=400, detail="At least one event is required")

    factors = [KitFactors(**e.model_dump()) for e in request.events]
    scores = get_kit_recommendation_from_events(factors)

    return BestKitResponse(
        best_kit=get_best_kit_recommendation(factors).value,
        scores={kit.value: score for kit, score in scores.items()},
    )


@router.get("/archetypes")
def list_archetypes():
    """All archetypes with descriptions and kits, primary first."""
    return [
        {
            "archetype": archetype.value,
            "description": ARCHETYPE_DESCRIPTIONS[archetype],
            "kits": [kit.value for kit in ARCHETYPE_TO_KITS[archetype]],
        }
        for archetype in Archetype
    ]


@router.get("/archetypes/{archetype}/affinity")
def archetype_affinity(archetype: str):
    """Affinity score of every kit for an archetype."""
    try:
        resolved = Archetype(archetype)
    except ValueError:
        raise HTTPException(status_code=404, detail="Archetype not found")

    return {kit.value: score for kit, score in get_kit_recommendation(resolved).items()}


@router.get("/activities")
def list_activities():
    """Known activities with display descriptions and the archetype each one scores toward."""
    return [
        {
            "activity": activity,
            "description": description,
            "archetype": ACTIVITY_TO_ARCHETYPE[activity].value if activity in ACTIVITY_TO_ARCHETYPE else None,
        }
        for activity, description in ACTIVITY_DESCRIPTIONS.items()
    ]


@router.get("/moods")
def list_moods():
    return [
        {"mood": mood, "description": description}
        for mood, description in MOOD_DESCRIPTIONS.items()
    ]
