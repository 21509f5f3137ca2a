from .user import User
from .intake_event import IntakeEvent
from .hydration_session import HydrationSession
from .kit_order import KitOrder, ORDER_STATUSES
from .coach_message import CoachMessage
