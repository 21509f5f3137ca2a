from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from app.db.database import Base


ORDER_STATUSES = ("pending", "in-progress", "completed")


class KitOrder(Base):
    """A kit ordered by a user, fulfilled by staff."""
    __tablename__ = "kit_orders"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    kit_name = Column(String, nullable=False)
    archetype = Column(String, nullable=True)
    status = Column(String, nullable=False, default="pending")
    location = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationship
    user = relationship("User", back_populates="kit_orders")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_name": self.user.name if self.user else "Unknown User",
            "kit_name": self.kit_name,
            "archetype": self.archetype,
            "status": self.status,
            "location": self.location or "Unknown",
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
