from sqlalchemy import Column, String, DateTime, Float, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from app.db.database import Base


class HydrationSession(Base):
    """
    A user's tracking day.

    Nutrient rates left null fall back to the configured defaults.
    """
    __tablename__ = "hydration_sessions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    start_time = Column(DateTime, default=datetime.utcnow)
    is_active = Column(Boolean, default=True)

    protein_rate_g_per_kg = Column(Float, nullable=True)
    sodium_rate_mg_per_kg = Column(Float, nullable=True)
    potassium_rate_mg_per_kg = Column(Float, nullable=True)

    # Relationships
    user = relationship("User", back_populates="hydration_sessions")
    events = relationship("IntakeEvent", back_populates="session")

    def rate_overrides(self) -> dict:
        return {
            "protein_rate": self.protein_rate_g_per_kg,
            "sodium_rate": self.sodium_rate_mg_per_kg,
            "potassium_rate": self.potassium_rate_mg_per_kg,
        }
