"""Default encouragement library."""

import logging

from sqlalchemy.orm import Session

from rhythm_engine.models.encouragement import Encouragement as EncouragementModel

logger = logging.getLogger(__name__)

ENCOURAGEMENTS: list[dict[str, str]] = [
    # Starting stage (first week)
    {"stage": "starting", "context": "general", "activity_type": "general",
     "message": "Every journey begins with a single breath"},
    {"stage": "starting", "context": "general", "activity_type": "general",
     "message": "You've taken the first step. That's often the hardest one."},
    {"stage": "starting", "context": "general", "activity_type": "mindfulness",
     "message": "A moment of stillness is a gift to yourself"},
    {"stage": "starting", "context": "tier_achieved", "activity_type": "general",
     "tier_name": "weekly", "message": "You showed up this week. That matters."},
    {"stage": "starting", "context": "tier_achieved", "activity_type": "general",
     "tier_name": "few_times", "message": "Three days! You're building something real."},
    # Building stage (weeks 2-3)
    {"stage": "building", "context": "general", "activity_type": "general",
     "message": "A practice is forming. You can feel it."},
    {"stage": "building", "context": "general", "activity_type": "mindfulness",
     "message": "The cushion remembers you now"},
    {"stage": "building", "context": "tier_achieved", "activity_type": "general",
     "tier_name": "most_days", "message": "Most days is more than most people."},
    {"stage": "building", "context": "tier_achieved", "activity_type": "general",
     "tier_name": "daily", "message": "A perfect week. Let that sink in."},
    {"stage": "building", "context": "streak_milestone", "activity_type": "general",
     "message": "Two weeks. The habit is taking root."},
    {"stage": "building", "context": "streak_milestone", "activity_type": "mindfulness",
     "message": "14 days of presence. Your mind is changing."},
    # Becoming stage (4+ weeks)
    {"stage": "becoming", "context": "general", "activity_type": "mindfulness",
     "message": "You're becoming a meditator"},
    {"stage": "becoming", "context": "general", "activity_type": "general",
     "message": "This is who you are now"},
    {"stage": "becoming", "context": "tier_achieved", "activity_type": "general",
     "tier_name": "daily", "message": "Daily practice. You're living the life."},
    {"stage": "becoming", "context": "tier_achieved", "activity_type": "general",
     "tier_name": "most_days", "message": "Consistency without rigidity. That's wisdom."},
    {"stage": "becoming", "context": "streak_milestone", "activity_type": "general",
     "message": "Look how far you've come"},
    {"stage": "becoming", "context": "streak_milestone", "activity_type": "mindfulness",
     "message": "A month of mindfulness. You are different now."},
    # Being stage (12+ weeks)
    {"stage": "being", "context": "general", "activity_type": "general",
     "message": "The practice practices you now"},
    # Mid-week nudges
    {"stage": "building", "context": "mid_week_nudge", "activity_type": "general",
     "message": "{remaining} more times this week to hit {tier}"},
    {"stage": "becoming", "context": "mid_week_nudge", "activity_type": "general",
     "message": "Keep the momentum going. {remaining} to go"},
    {"stage": "starting", "context": "mid_week_nudge", "activity_type": "general",
     "message": "Just {remaining} more to make this week count"},
]


def seed_encouragements(db: Session) -> int:
    """Insert the default library, skipping messages that already exist.

    Returns:
        Number of messages inserted
    """
    existing = {message for (message,) in db.query(EncouragementModel.message).all()}

    inserted = 0
    for data in ENCOURAGEMENTS:
        if data["message"] in existing:
            continue
        db.add(
            EncouragementModel(
                stage=data["stage"],
                context=data["context"],
                activity_type=data["activity_type"],
                tier_name=data.get("tier_name"),
                message=data["message"],
                is_active=True,
            )
        )
        existing.add(data["message"])
        inserted += 1

    db.commit()
    logger.info(f"Seeded {inserted} encouragement messages")
    return inserted
