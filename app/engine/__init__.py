from .recommender import HydrationEngine, UserNotFoundError, hydration_engine, day_window, to_naive_utc
from .coach import CoachReply, HydrationCoach, hydration_coach
