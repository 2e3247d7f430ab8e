"""Journey stage classification."""

from enum import Enum

from rhythm_engine.models.encouragement import JourneyStage
from rhythm_engine.schemas.chain import RhythmTotals


class JourneyBasis(str, Enum):
    """Aggregate that drives the journey stage."""

    WEEKS = "weeks"  # weeks with at least one complete day
    HOURS = "hours"  # accumulated practice hours


STAGE_ORDER: list[JourneyStage] = list(JourneyStage)

# Minimum measure for each stage above "starting", highest first
STAGE_BREAKPOINTS: dict[JourneyBasis, list[tuple[float, JourneyStage]]] = {
    JourneyBasis.WEEKS: [
        (12, JourneyStage.BEING),
        (4, JourneyStage.BECOMING),
        (2, JourneyStage.BUILDING),
    ],
    JourneyBasis.HOURS: [
        (100, JourneyStage.BEING),
        (25, JourneyStage.BECOMING),
        (5, JourneyStage.BUILDING),
    ],
}


def get_journey_stage(
    measure: float, basis: JourneyBasis | str = JourneyBasis.WEEKS
) -> JourneyStage:
    """Map weeks active (or hours practiced) to a journey stage.

    Monotonic: a larger measure never yields an earlier stage.
    """
    for threshold, stage in STAGE_BREAKPOINTS[JourneyBasis(basis)]:
        if measure >= threshold:
            return stage
    return JourneyStage.STARTING


def journey_measure(totals: RhythmTotals, basis: JourneyBasis | str = JourneyBasis.WEEKS) -> float:
    """Pick the measure for ``basis`` out of a rhythm's totals."""
    if JourneyBasis(basis) is JourneyBasis.HOURS:
        return totals.total_hours
    return totals.weeks_active
