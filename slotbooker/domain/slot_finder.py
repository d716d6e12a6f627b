"""
Enumeration of feasible candidate slots on a fixed grid.

Pure domain logic: no I/O, no locking. Callers are expected to hand in a
consistent snapshot of busy intervals.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from pendulum import DateTime

from .exceptions import SearchWindowTooLargeError
from .models import SearchWindow, TimeRange
from .policy import SchedulingPolicy

logger = logging.getLogger(__name__)


class SlotFinder:
    """
    Finds every grid-aligned slot in a window that all participants can attend.

    Algorithm:
    1. Start at ``window.start`` and advance by ``step`` minutes
    2. Stop once ``start + duration`` would pass ``window.end``
    3. Keep a candidate only if it clears every busy interval of every
       participant, the daily lunch window and the excluded start hour
    """

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or SchedulingPolicy()

    def find_candidates(
        self,
        participants: Sequence[str],
        busy_by_participant: Mapping[str, Sequence[TimeRange]],
        window: SearchWindow,
        duration_minutes: int,
        step_minutes: Optional[int] = None,
    ) -> List[TimeRange]:
        """
        Enumerate all feasible candidate slots in generation order.

        Args:
            participants: Participant ids whose calendars must be free
            busy_by_participant: Busy intervals per participant id; missing
                participants are treated as having no commitments
            window: Bounds for the enumeration
            duration_minutes: Length of every candidate
            step_minutes: Grid step, defaults to the policy's step

        Returns:
            List of candidate TimeRange objects ordered by start time. An empty
            list means no slot is available and is not an error.

        Raises:
            ValueError: If duration or step is not positive
            SearchWindowTooLargeError: If the window exceeds the policy cap
        """
        step = step_minutes if step_minutes is not None else self.policy.step_minutes

        if duration_minutes <= 0:
            raise ValueError(f"Duration must be positive, got {duration_minutes}")
        if step <= 0:
            raise ValueError(f"Step must be positive, got {step}")

        self._check_window_span(window)

        # Also covers inverted windows, whose span is zero.
        if duration_minutes > window.span_minutes():
            return []

        busy_times: Dict[str, Sequence[TimeRange]] = {
            participant: busy_by_participant.get(participant, [])
            for participant in participants
        }

        candidates: List[TimeRange] = []
        current = window.start

        while current.add(minutes=duration_minutes) <= window.end:
            slot = TimeRange(start=current, end=current.add(minutes=duration_minutes))

            if self.is_feasible(slot, busy_times):
                candidates.append(slot)

            current = current.add(minutes=step)

        logger.debug(
            "Found %d candidate(s) of %d min between %s and %s",
            len(candidates), duration_minutes, window.start, window.end,
        )
        return candidates

    def is_feasible(
        self,
        slot: TimeRange,
        busy_times: Mapping[str, Sequence[TimeRange]],
    ) -> bool:
        """Check a single slot against every exclusion rule."""
        if self._starts_in_excluded_hour(slot):
            return False

        if self._overlaps_lunch(slot):
            return False

        for busy_ranges in busy_times.values():
            for busy in busy_ranges:
                if slot.overlaps(busy):
                    return False

        return True

    def lunch_window_for(self, day: DateTime) -> TimeRange:
        """
        Get the lunch break for the calendar day of ``day``.

        The window is built in the timezone of ``day`` itself so that the
        exclusion follows the slot's civil time.
        """
        start = day.set(hour=self.policy.lunch_start_hour, minute=0, second=0, microsecond=0)
        end = day.set(hour=self.policy.lunch_end_hour, minute=0, second=0, microsecond=0)
        return TimeRange(start=start, end=end)

    def _overlaps_lunch(self, slot: TimeRange) -> bool:
        return slot.overlaps(self.lunch_window_for(slot.start))

    def _starts_in_excluded_hour(self, slot: TimeRange) -> bool:
        return slot.start.hour == self.policy.excluded_start_hour

    def _check_window_span(self, window: SearchWindow) -> None:
        max_minutes = self.policy.max_window_days * 24 * 60
        if window.span_minutes() > max_minutes:
            raise SearchWindowTooLargeError(
                f"Search window spans more than {self.policy.max_window_days} days"
            )
