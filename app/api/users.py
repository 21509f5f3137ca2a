from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel, EmailStr

from app.config import get_settings
from app.db import get_db
from app.models import User
from app.engine.body import Sex, compute_body_composition, resolve_body_type

router = APIRouter()

VALID_SEXES = [s.value for s in Sex]


class UserCreate(BaseModel):
    name: str
    email: EmailStr
    # Body profile (metric units)
    weight_kg: Optional[float] = None
    sex: str  # "male", "female"
    body_type: Optional[str] = None  # male: muscular/athletic/stocky, female: toned/athletic/curvy
    role: str = "member"


class UserUpdate(BaseModel):
    name: Optional[str] = None
    weight_kg: Optional[float] = None
    sex: Optional[str] = None
    body_type: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    weight_kg: Optional[float]
    sex: Optional[str]
    body_type: Optional[str]
    role: str

    class Config:
        from_attributes = True


class BodyCompositionResponse(BaseModel):
    weight_kg: float
    sex: str
    body_type: str
    body_fat_percentage: float
    lean_body_mass: float


def _validate_profile(sex: Optional[str], weight_kg: Optional[float]):
    if sex is not None and sex not in VALID_SEXES:
        raise HTTPException(status_code=400, detail=f"sex must be one of {VALID_SEXES}")
    if weight_kg is not None and weight_kg <= 0:
        raise HTTPException(status_code=400, detail="weight_kg must be positive")


@router.post("", response_model=UserResponse)
def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """Create a new user."""
    _validate_profile(user_data.sex, user_data.weight_kg)

    existing = db.query(User).filter(User.email == user_data.email).first()
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        name=user_data.name,
        email=user_data.email,
        weight_kg=user_data.weight_kg,
        sex=user_data.sex,
        body_type=resolve_body_type(user_data.sex, user_data.body_type),
        role=user_data.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    return _user_to_response(user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db)):
    """Get a user by ID."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return _user_to_response(user)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(user_id: str, user_data: UserUpdate, db: Session = Depends(get_db)):
    """
    Update a user's profile.

    Changing sex re-resolves the stored body type so it stays valid for the new sex.
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    _validate_profile(user_data.sex, user_data.weight_kg)

    if user_data.name is not None:
        user.name = user_data.name
    if user_data.weight_kg is not None:
        user.weight_kg = user_data.weight_kg
    if user_data.sex is not None:
        user.sex = user_data.sex
    if user_data.body_type is not None:
        user.body_type = user_data.body_type
    if user_data.sex is not None or user_data.body_type is not None:
        user.body_type = resolve_body_type(user.sex, user.body_type)

    db.commit()
    db.refresh(user)

    return _user_to_response(user)


@router.get("/{user_id}/body-composition", response_model=BodyCompositionResponse)
def get_body_composition(user_id: str, db: Session = Depends(get_db)):
    """Body fat percentage and lean body mass for the stored profile."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    body = compute_body_composition(
        user.weight_kg,
        user.sex,
        user.body_type,
        default_weight=get_settings().default_weight_kg
    )
    return BodyCompositionResponse(**body.to_dict())


def _user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        weight_kg=user.weight_kg,
        sex=user.sex,
        body_type=user.body_type,
        role=user.role or "member",
    )
