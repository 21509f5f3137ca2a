from typing import List, Optional
from datetime import date, datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel

from app.db import get_db
from app.models import User, IntakeEvent, HydrationSession
from app.engine.body import EventType, Intensity
from app.engine.recommender import day_window, hydration_engine, to_naive_utc

router = APIRouter()

EVENT_TYPES = [e.value for e in EventType]
INTENSITIES = [i.value for i in Intensity]


class EventCreate(BaseModel):
    event_type: str  # water, electrolyte, protein, workout, food
    timestamp: Optional[datetime] = None  # defaults to now (UTC)
    amount: float = 0.0  # ml for water/electrolyte, g for protein/food
    food: Optional[str] = None
    sodium_mg: Optional[float] = None
    potassium_mg: Optional[float] = None
    protein_g: Optional[float] = None
    activity: Optional[str] = None
    duration_minutes: Optional[int] = None
    intensity: Optional[str] = None
    pre_weight_kg: Optional[float] = None
    post_weight_kg: Optional[float] = None
    notes: Optional[str] = None


class EventResponse(BaseModel):
    id: str
    user_id: str
    session_id: Optional[str]
    event_type: str
    timestamp: Optional[str]
    amount: float
    food: Optional[str]
    sodium_mg: Optional[float]
    potassium_mg: Optional[float]
    protein_g: Optional[float]
    activity: Optional[str]
    duration_minutes: Optional[int]
    intensity: Optional[str]
    pre_weight_kg: Optional[float]
    post_weight_kg: Optional[float]
    notes: Optional[str]


class SessionCreate(BaseModel):
    start_time: Optional[datetime] = None  # defaults to now (UTC)
    protein_rate_g_per_kg: Optional[float] = None
    sodium_rate_mg_per_kg: Optional[float] = None
    potassium_rate_mg_per_kg: Optional[float] = None


def _validate_event(data: EventCreate):
    if data.event_type not in EVENT_TYPES:
        raise HTTPException(status_code=400, detail=f"event_type must be one of {EVENT_TYPES}")
    if data.amount < 0:
        raise HTTPException(status_code=400, detail="amount cannot be negative")
    if data.intensity is not None and data.intensity not in INTENSITIES:
        raise HTTPException(status_code=400, detail=f"intensity must be one of {INTENSITIES}")
    if (data.pre_weight_kg is None) != (data.post_weight_kg is None):
        raise HTTPException(
            status_code=400,
            detail="pre_weight_kg and post_weight_kg must be provided together"
        )


@router.post("/{user_id}", response_model=EventResponse)
def log_event(user_id: str, event_data: EventCreate, db: Session = Depends(get_db)):
    """
    Log an intake or activity event.

    Events are immutable once created. The event is attached to the user's
    active hydration session for that UTC day if there is one.
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    _validate_event(event_data)

    timestamp = to_naive_utc(event_data.timestamp or datetime.now(timezone.utc))
    session = hydration_engine.get_active_session(user_id, db, timestamp)

    event = IntakeEvent(
        user_id=user_id,
        session_id=session.id if session else None,
        event_type=event_data.event_type,
        timestamp=timestamp,
        amount=event_data.amount,
        food=event_data.food,
        sodium_mg=event_data.sodium_mg,
        potassium_mg=event_data.potassium_mg,
        protein_g=event_data.protein_g,
        activity=event_data.activity,
        duration_minutes=event_data.duration_minutes,
        intensity=event_data.intensity,
        pre_weight_kg=event_data.pre_weight_kg,
        post_weight_kg=event_data.post_weight_kg,
        notes=event_data.notes,
    )
    db.add(event)
    db.commit()
    db.refresh(event)

    return EventResponse(**event.to_dict())


@router.get("/{user_id}", response_model=List[EventResponse])
def list_events(
    user_id: str,
    day: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """List a user's events for one UTC day (default today), oldest first."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if day is None:
        start, end = day_window(datetime.now(timezone.utc))
    else:
        start = datetime(day.year, day.month, day.day)
        end = start + timedelta(days=1)

    events = db.query(IntakeEvent).filter(
        IntakeEvent.user_id == user_id,
        IntakeEvent.timestamp >= start,
        IntakeEvent.timestamp < end
    ).order_by(IntakeEvent.timestamp.asc()).all()

    return [EventResponse(**e.to_dict()) for e in events]


@router.post("/{user_id}/session")
def start_session(user_id: str, session_data: SessionCreate, db: Session = Depends(get_db)):
    """
    Start a new hydration session, closing any active one.

    Sessions cover the UTC day they start on. Rates left unset use the
    configured defaults.
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    for field in ["protein_rate_g_per_kg", "sodium_rate_mg_per_kg", "potassium_rate_mg_per_kg"]:
        value = getattr(session_data, field)
        if value is not None and value < 0:
            raise HTTPException(status_code=400, detail=f"{field} cannot be negative")

    db.query(HydrationSession).filter(
        HydrationSession.user_id == user_id,
        HydrationSession.is_active.is_(True)
    ).update({"is_active": False})

    session = HydrationSession(
        user_id=user_id,
        start_time=to_naive_utc(session_data.start_time or datetime.now(timezone.utc)),
        protein_rate_g_per_kg=session_data.protein_rate_g_per_kg,
        sodium_rate_mg_per_kg=session_data.sodium_rate_mg_per_kg,
        potassium_rate_mg_per_kg=session_data.potassium_rate_mg_per_kg,
    )
    db.add(session)
    db.commit()
    db.refresh(session)

    return {
        "id": session.id,
        "user_id": user_id,
        "start_time": session.start_time.isoformat() if session.start_time else None,
        "is_active": session.is_active,
        "rates": session.rate_overrides(),
    }
