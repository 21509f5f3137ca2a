import logging
from dataclasses import dataclass
from typing import List, Optional

from openai import AsyncOpenAI, OpenAIError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models import CoachMessage

logger = logging.getLogger(__name__)


@dataclass
class CoachReply:
    message: str
    source: str  # llm, template
    response_id: Optional[str] = None


class HydrationCoach:
    """LLM-written coaching message for a user's hydration day."""

    SYSTEM_PROMPT = """You are a friendly hydration coach inside a wellness app.

You receive a user's hydration numbers for today and the kit the app recommends. You must:
1. Explain the user's hydration gap in one or two plain sentences
2. Suggest a concrete next drink (amount in ml) that moves them toward their target
3. Mention the recommended kit by name and what it is for
4. Keep the whole message under 80 words

You are NOT a doctor. This is general wellness guidance, not medical advice."""

    def __init__(self):
        settings = get_settings()
        self.model = settings.coach_model
        self.client = AsyncOpenAI(api_key=settings.openai_api_key) if settings.openai_api_key else None

    async def generate_message(self, recommendation: dict) -> CoachReply:
        """Coaching text for a recommendation produced by HydrationEngine."""
        if self.client is None:
            return CoachReply(message=self._fallback_message(recommendation), source="template")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.SYSTEM_PROMPT},
                    {"role": "user", "content": self._build_prompt(recommendation)}
                ],
                temperature=0.6,
                max_tokens=300
            )
            content: Optional[str] = response.choices[0].message.content
            if content:
                return CoachReply(message=content.strip(), source="llm", response_id=response.id)
            logger.warning("Coach model returned an empty message, using template")

        except OpenAIError as e:
            logger.error(f"Coach LLM error: {e}")

        return CoachReply(message=self._fallback_message(recommendation), source="template")

    def save_message(
        self,
        db: Session,
        recommendation: dict,
        reply: CoachReply,
        session_id: Optional[str] = None
    ) -> CoachMessage:
        """Store a reply on the user's timeline."""
        gap = recommendation["assessment"]["gap"]
        record = CoachMessage(
            user_id=recommendation["user_id"],
            session_id=session_id,
            message=reply.message,
            source=reply.source,
            response_id=reply.response_id,
            best_kit=recommendation["best_kit"],
            archetype=recommendation["archetype"],
            context=gap["context"],
            hydration_gap_ml=gap["hydration_gap_ml"],
        )
        db.add(record)
        db.commit()
        db.refresh(record)

        logger.info(f"Saved {reply.source} coach message {record.id} for user {record.user_id}")
        return record

    def get_history(self, db: Session, user_id: str, limit: int = 20) -> List[CoachMessage]:
        return db.query(CoachMessage).filter(
            CoachMessage.user_id == user_id
        ).order_by(CoachMessage.created_at.desc()).limit(limit).all()

    def _build_prompt(self, recommendation: dict) -> str:
        gap = recommendation["assessment"]["gap"]
        targets = recommendation["assessment"]["targets"]
        activity = recommendation["assessment"]["intake"]["latest_activity"]

        return f"""## Today's Hydration
- Hydration gap: {gap['hydration_gap_ml']:.0f} ml ({gap['context']})
- Water consumed: {gap['total_water_input_ml']:.0f} ml
- Recommended intake: {gap['recommended_intake_ml']:.0f} ml
- Daily water target: {targets['water_ml']:.0f} ml
- Latest activity: {activity['activity']} for {activity['duration_minutes']} min ({activity['intensity']})

## Recommendation
- Archetype: {recommendation['archetype']} - {recommendation['archetype_description']}
- Kit: {recommendation['best_kit']}

Write the coaching message."""

    def _fallback_message(self, recommendation: dict) -> str:
        """Template message when the LLM is unavailable."""
        gap = recommendation["assessment"]["gap"]
        gap_ml = gap["hydration_gap_ml"]
        kit = recommendation["best_kit"]

        if gap_ml > 200:
            next_drink = min(500, int(round(gap_ml / 50.0)) * 50)
            status = f"You're about {gap_ml:.0f} ml behind today. Try {next_drink} ml of water in the next hour."
        elif gap_ml < -200:
            status = "You're ahead of your hydration needs today. Sip to thirst from here."
        else:
            status = "You're right on track with your hydration today."

        return f"{status} Recommended kit: {kit}."


# Singleton instance
hydration_coach = HydrationCoach()
