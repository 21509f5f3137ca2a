from sqlalchemy import Column, String, DateTime, Float, Integer, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from app.db.database import Base


class IntakeEvent(Base):
    """A single logged water, electrolyte, protein, food or workout event."""
    __tablename__ = "intake_events"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    session_id = Column(String, ForeignKey("hydration_sessions.id"), nullable=True)
    event_type = Column(String, nullable=False)  # water, electrolyte, protein, workout, food
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    # ml for water/electrolyte, g for protein/food
    amount = Column(Float, nullable=False, default=0.0)

    # Food events
    food = Column(String, nullable=True)  # fruits, soup, rice, ...

    # Nutrient contributions (electrolyte drinks, protein shakes, foods)
    sodium_mg = Column(Float, nullable=True)
    potassium_mg = Column(Float, nullable=True)
    protein_g = Column(Float, nullable=True)

    # Workout events
    activity = Column(String, nullable=True)  # hiit, run, desk, ...
    duration_minutes = Column(Integer, nullable=True)
    intensity = Column(String, nullable=True)  # light, moderate, intense
    pre_weight_kg = Column(Float, nullable=True)
    post_weight_kg = Column(Float, nullable=True)

    notes = Column(Text, nullable=True)

    # Relationships
    user = relationship("User", back_populates="intake_events")
    session = relationship("HydrationSession", back_populates="events")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "session_id": self.session_id,
            "event_type": self.event_type,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "amount": self.amount,
            "food": self.food,
            "sodium_mg": self.sodium_mg,
            "potassium_mg": self.potassium_mg,
            "protein_g": self.protein_g,
            "activity": self.activity,
            "duration_minutes": self.duration_minutes,
            "intensity": self.intensity,
            "pre_weight_kg": self.pre_weight_kg,
            "post_weight_kg": self.post_weight_kg,
            "notes": self.notes,
        }
