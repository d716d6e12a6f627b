"""
Scoring and selection of candidate slots.

Every candidate receives an additive integer score (lower is better). The
scorer picks the first candidate holding the minimum score, so among ties the
earliest generated slot wins.
"""

import logging
from typing import List, Mapping, Optional, Sequence

from pendulum import DateTime

from .exceptions import SchedulingContractError
from .models import TimeRange
from .policy import ScoringWeights

logger = logging.getLogger(__name__)


def _minutes_between(later: DateTime, earlier: DateTime) -> int:
    # Truncates toward zero, so -14.5 minutes counts as -14.
    return int((later.timestamp() - earlier.timestamp()) / 60)


class SlotScorer:
    """
    Ranks candidate slots by time of day and proximity to existing events.
    """

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or ScoringWeights()

    def score(
        self,
        slot: TimeRange,
        participants: Sequence[str],
        busy_by_participant: Mapping[str, Sequence[TimeRange]],
    ) -> int:
        """
        Compute the desirability score of a single slot.

        Penalties are summed over every busy interval of every participant,
        not only the closest one.
        """
        w = self.weights
        hour = slot.start.hour

        score = w.hour_weight * hour

        if hour < w.working_start_hour or hour > w.working_end_hour:
            score += w.off_hours_penalty

        for participant in participants:
            for busy in busy_by_participant.get(participant, []):
                score += self._proximity_penalty(slot, busy)

        return score

    def select_best(
        self,
        candidates: Sequence[TimeRange],
        participants: Sequence[str],
        busy_by_participant: Mapping[str, Sequence[TimeRange]],
    ) -> TimeRange:
        """
        Return the lowest-scoring candidate, earliest in sequence on ties.

        Raises:
            SchedulingContractError: If ``candidates`` is empty
        """
        if not candidates:
            raise SchedulingContractError(
                "select_best() requires at least one candidate; "
                "an empty discovery result must be handled as a conflict first"
            )

        scores: List[int] = [
            self.score(slot, participants, busy_by_participant)
            for slot in candidates
        ]
        best_score = min(scores)

        for slot, slot_score in zip(candidates, scores):
            if slot_score == best_score:
                logger.debug("Selected %s with score %d", slot, slot_score)
                return slot

        raise SchedulingContractError("No candidate matched the minimum score")

    def _proximity_penalty(self, slot: TimeRange, busy: TimeRange) -> int:
        w = self.weights
        penalty = 0

        after_busy = _minutes_between(slot.start, busy.end)
        before_busy = _minutes_between(busy.start, slot.end)

        # Buffer check uses absolute distances on both sides.
        if abs(after_busy) < w.buffer_minutes or abs(before_busy) < w.buffer_minutes:
            penalty += w.buffer_penalty

        if 0 < after_busy < w.short_gap_minutes:
            penalty += w.short_gap_penalty

        return penalty
