from sqlalchemy import Column, String, DateTime, Float, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from app.db.database import Base


class CoachMessage(Base):
    """A coaching message shown to a user, kept on their timeline."""
    __tablename__ = "coach_messages"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    session_id = Column(String, ForeignKey("hydration_sessions.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    message = Column(Text, nullable=False)
    source = Column(String, nullable=False)  # llm, template
    response_id = Column(String, nullable=True)  # provider response id for llm messages

    # Context the message was written from
    best_kit = Column(String, nullable=False)
    archetype = Column(String, nullable=True)
    context = Column(String, nullable=True)  # severe, moderate, mild, optimal, excess
    hydration_gap_ml = Column(Float, nullable=True)

    # Relationship
    user = relationship("User", back_populates="coach_messages")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "session_id": self.session_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "message": self.message,
            "source": self.source,
            "response_id": self.response_id,
            "best_kit": self.best_kit,
            "archetype": self.archetype,
            "context": self.context,
            "hydration_gap_ml": self.hydration_gap_ml,
        }
