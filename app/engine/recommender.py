import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.models import User, IntakeEvent, HydrationSession
from .body import EventType
from .gap import HydrationAssessment, HydrationGapResult, assess_hydration
from .kits import ARCHETYPE_DESCRIPTIONS, get_archetype_kits, get_hydration_archetype
from .scoring import KitFactors, get_best_kit_recommendation, get_kit_recommendation_from_events

logger = logging.getLogger(__name__)


class UserNotFoundError(LookupError):
    """The referenced user has no profile record."""

    def __init__(self, user_id: str):
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


def to_naive_utc(value: datetime) -> datetime:
    """Naive UTC datetime for value; naive inputs are taken to already be UTC."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def day_window(now: datetime) -> Tuple[datetime, datetime]:
    """UTC calendar day containing now, as naive UTC datetimes."""
    now = to_naive_utc(now)
    start = datetime(now.year, now.month, now.day)
    return start, start + timedelta(days=1)


class HydrationEngine:
    """Loads a user's profile and day from the store and runs the hydration pipeline."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def get_user(self, user_id: str, db: Session) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def get_todays_events(self, user_id: str, db: Session, now: datetime) -> List[IntakeEvent]:
        start, end = day_window(now)
        return db.query(IntakeEvent).filter(
            IntakeEvent.user_id == user_id,
            IntakeEvent.timestamp >= start,
            IntakeEvent.timestamp < end
        ).order_by(IntakeEvent.timestamp).all()

    def get_active_session(self, user_id: str, db: Session, now: datetime) -> Optional[HydrationSession]:
        """Latest active session started on now's UTC day; earlier days' sessions no longer apply."""
        start, end = day_window(now)
        return db.query(HydrationSession).filter(
            HydrationSession.user_id == user_id,
            HydrationSession.is_active.is_(True),
            HydrationSession.start_time >= start,
            HydrationSession.start_time < end
        ).order_by(HydrationSession.start_time.desc()).first()

    def _rates(self, session: Optional[HydrationSession]) -> dict:
        rates = {
            "protein_rate": self.settings.protein_rate_g_per_kg,
            "sodium_rate": self.settings.sodium_rate_mg_per_kg,
            "potassium_rate": self.settings.potassium_rate_mg_per_kg,
        }
        if session is not None:
            for key, value in session.rate_overrides().items():
                if value is not None:
                    rates[key] = value
        return rates

    def assess(self, user_id: str, db: Session, now: datetime) -> HydrationAssessment:
        """
        Full hydration assessment for the user's current UTC day.

        Raises:
            UserNotFoundError: if the user does not exist
        """
        user = self.get_user(user_id, db)
        events = self.get_todays_events(user_id, db, now)
        rates = self._rates(self.get_active_session(user_id, db, now))

        logger.info(f"Assessing hydration for user {user_id} with {len(events)} events")

        return assess_hydration(
            user.to_profile(),
            events,
            default_weight=self.settings.default_weight_kg,
            **rates
        )

    def calculate_gap(self, user_id: str, db: Session, now: datetime) -> HydrationGapResult:
        return self.assess(user_id, db, now).gap

    def build_kit_factors(
        self,
        events: List[IntakeEvent],
        has_gap: bool,
        now: datetime,
        mood: Optional[str] = None
    ) -> List[KitFactors]:
        """One scoring event per logged workout, or the current moment if there were none."""
        factors = []
        for event in events:
            if event.event_type != EventType.WORKOUT.value:
                continue
            sweat_loss = None
            if event.pre_weight_kg is not None and event.post_weight_kg is not None:
                sweat_loss = max(0.0, (event.pre_weight_kg - event.post_weight_kg) * 1000)
            factors.append(KitFactors(
                activity=event.activity,
                time=event.timestamp,
                hydration_gap=has_gap,
                mood=mood,
                sweat_loss=sweat_loss,
            ))

        if not factors:
            factors.append(KitFactors(activity="desk", time=now, hydration_gap=has_gap, mood=mood))
        return factors

    def get_recommendation(
        self,
        user_id: str,
        db: Session,
        now: datetime,
        mood: Optional[str] = None
    ) -> dict:
        """
        Gap assessment, archetype and kits for the user's day.

        Args:
            user_id: The user to recommend for
            db: Database session
            now: Reference time for "today" and time-of-day scoring
            mood: Optional self-reported mood (low, tight, foggy, ...)

        Returns:
            Dictionary with the assessment, archetype, ordered kits and the
            best kit from the weighted scorer
        """
        now = to_naive_utc(now)
        assessment = self.assess(user_id, db, now)
        activity = assessment.intake.latest_activity
        has_gap = assessment.gap.has_gap

        archetype = get_hydration_archetype(
            activity.activity,
            time=now.strftime("%H:%M"),
            hydration_gap=has_gap,
            mood=mood
        )
        kits = get_archetype_kits(archetype)

        events = self.get_todays_events(user_id, db, now)
        factors = self.build_kit_factors(events, has_gap, now, mood)
        scores = get_kit_recommendation_from_events(factors)
        best_kit = get_best_kit_recommendation(factors)

        return {
            "user_id": user_id,
            "assessment": assessment.to_dict(),
            "archetype": archetype.value,
            "archetype_description": ARCHETYPE_DESCRIPTIONS[archetype],
            "kits": [k.to_dict() for k in kits],
            "best_kit": best_kit.value,
            "kit_scores": {kit.value: score for kit, score in scores.items()},
        }


hydration_engine = HydrationEngine()
