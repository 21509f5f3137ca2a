from sqlalchemy import Column, String, DateTime, Float
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from app.db.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Body profile used for hydration math (metric units)
    weight_kg = Column(Float, nullable=True)
    sex = Column(String, nullable=True)  # "male", "female"
    body_type = Column(String, nullable=True)  # muscular/athletic/stocky or toned/athletic_female/curvy

    role = Column(String, default="member")  # member, staff

    # Relationships
    intake_events = relationship("IntakeEvent", back_populates="user", cascade="all, delete-orphan")
    hydration_sessions = relationship("HydrationSession", back_populates="user", cascade="all, delete-orphan")
    kit_orders = relationship("KitOrder", back_populates="user", cascade="all, delete-orphan")
    coach_messages = relationship("CoachMessage", back_populates="user", cascade="all, delete-orphan")

    def to_profile(self) -> dict:
        """Profile fields consumed by the hydration engine."""
        return {
            "weight_kg": self.weight_kg,
            "sex": self.sex,
            "body_type": self.body_type,
        }
