"""Encouragement message selection.

Messages are looked up from most to least specific, re-querying with one
constraint fewer each time nothing matches:

1. stage + context + activity type + tier (only when a tier is given)
2. stage + context + activity type
3. stage + context, generic activity
4. stage + "general" context

A random candidate is picked from the first non-empty step. If the library
has nothing at all, a built-in per-stage message is returned, so selection
never comes back empty.
"""

import logging
import random
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from rhythm_engine.models.encouragement import (
    Encouragement as EncouragementModel,
    EncouragementContext,
    JourneyStage,
    TierName,
)

logger = logging.getLogger(__name__)

GENERAL = "general"

DEFAULT_FALLBACKS: dict[JourneyStage, str] = {
    JourneyStage.STARTING: "Every journey begins with a single step",
    JourneyStage.BUILDING: "A practice is forming",
    JourneyStage.BECOMING: "This is who you are now",
    JourneyStage.BEING: "The practice practices you now",
}


class _Placeholders(dict):
    """Leaves unknown ``{name}`` fields in place."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render_message(message: str, placeholders: Mapping[str, Any] | None = None) -> str:
    """Fill ``{name}`` fields of a message template."""
    if not placeholders:
        return message
    try:
        return message.format_map(_Placeholders(placeholders))
    except (ValueError, IndexError):
        logger.warning(f"Could not render encouragement template: {message!r}")
        return message


class EncouragementService:
    """Selects encouragement messages from the encouragement library."""

    def __init__(
        self,
        db: Session,
        rng: random.Random | None = None,
        fallbacks: Mapping[str, str] | None = None,
    ):
        self.db = db
        self.rng = rng or random.Random()
        self.fallbacks = {stage.value: message for stage, message in DEFAULT_FALLBACKS.items()}
        if fallbacks:
            self.fallbacks.update({str(k): v for k, v in fallbacks.items() if v})

    def _candidates(self, stage: str, context: str, **filters: str) -> list[EncouragementModel]:
        query = self.db.query(EncouragementModel).filter(
            EncouragementModel.stage == stage,
            EncouragementModel.context == context,
            EncouragementModel.is_active.is_(True),
        )
        for column, value in filters.items():
            query = query.filter(getattr(EncouragementModel, column) == value)
        return query.order_by(EncouragementModel.id).all()

    def find_candidates(
        self,
        stage: JourneyStage | str,
        context: EncouragementContext | str,
        activity_type: str = GENERAL,
        tier_name: TierName | str | None = None,
    ) -> list[EncouragementModel]:
        """Return the candidates of the most specific step that has any."""
        stage = JourneyStage(stage).value
        context = EncouragementContext(context).value
        activity_type = activity_type or GENERAL

        steps: list[tuple[str, dict[str, str]]] = []
        if tier_name:
            steps.append(
                (context, {"activity_type": activity_type, "tier_name": TierName(tier_name).value})
            )
        steps.append((context, {"activity_type": activity_type}))
        steps.append((context, {"activity_type": GENERAL}))
        steps.append((EncouragementContext.GENERAL.value, {}))

        for step_context, filters in steps:
            candidates = self._candidates(stage, step_context, **filters)
            if candidates:
                return candidates
        return []

    def select(
        self,
        stage: JourneyStage | str,
        context: EncouragementContext | str,
        activity_type: str = GENERAL,
        tier_name: TierName | str | None = None,
        placeholders: Mapping[str, Any] | None = None,
    ) -> str:
        """Pick one encouragement message. Never returns an empty string."""
        candidates = self.find_candidates(stage, context, activity_type, tier_name)
        messages = [c.message for c in candidates if c.message]
        if messages:
            return render_message(self.rng.choice(messages), placeholders)

        stage = JourneyStage(stage).value
        logger.debug(f"No encouragement for stage={stage} context={context}, using fallback")
        return self.fallbacks.get(stage) or DEFAULT_FALLBACKS[JourneyStage(stage)]
