"""
Application service for booking shared meeting slots.

The service reads busy intervals from a calendar store, delegates discovery
and ranking to the domain-level ``SlotFinder`` and ``SlotScorer`` and books the
winning slot for every participant. The read and the write happen under the
store's participant lock so that concurrent requests cannot double-book.
"""

from __future__ import annotations

import logging
import uuid
from typing import Dict, List, Sequence

from pendulum import DateTime

from ..adapters.calendar_store import CalendarStore
from ..domain.exceptions import InvalidRequestError, NoAvailableSlotError
from ..domain.models import Booking, Event, SearchWindow, TimeRange
from ..domain.slot_finder import SlotFinder
from ..domain.slot_scorer import SlotScorer

logger = logging.getLogger(__name__)

DEFAULT_MEETING_TITLE = "New Meeting"


class MeetingScheduler:
    """
    Orchestrates busy-time retrieval, slot selection and booking.
    """

    def __init__(
        self,
        store: CalendarStore,
        slot_finder: SlotFinder,
        slot_scorer: SlotScorer,
    ) -> None:
        self._store = store
        self._slot_finder = slot_finder
        self._slot_scorer = slot_scorer

    def schedule(
        self,
        *,
        participants: Sequence[str],
        window: SearchWindow,
        duration_minutes: int,
        title: str = DEFAULT_MEETING_TITLE,
    ) -> Booking:
        """
        Find the best slot for all participants and book it.

        Raises:
            InvalidRequestError: If participants or duration are invalid
            SearchWindowTooLargeError: If the window exceeds the configured cap
            NoAvailableSlotError: If no slot works for everyone
        """
        participant_list = self.normalize_participants(participants)

        if duration_minutes <= 0:
            raise InvalidRequestError("durationMinutes must be greater than zero")

        with self._store.lock(participant_list):
            busy_times = self.fetch_busy_times(participant_list)

            candidates = self._slot_finder.find_candidates(
                participants=participant_list,
                busy_by_participant=busy_times,
                window=window,
                duration_minutes=duration_minutes,
            )
            if not candidates:
                logger.info(
                    "No slot of %d min for %s between %s and %s",
                    duration_minutes, ", ".join(participant_list), window.start, window.end,
                )
                raise NoAvailableSlotError()

            best = self._slot_scorer.select_best(candidates, participant_list, busy_times)
            events = [
                self._store.append(participant, best, title)
                for participant in participant_list
            ]

        booking = Booking(
            meeting_id=str(uuid.uuid4()),
            title=title,
            participants=participant_list,
            slot=best,
            events=events,
        )
        logger.info(
            "Booked meeting %s for %s at %s (%d candidate(s))",
            booking.meeting_id, ", ".join(participant_list), best, len(candidates),
        )
        return booking

    def fetch_busy_times(self, participants: Sequence[str]) -> Dict[str, List[TimeRange]]:
        """Read busy intervals for every requested participant."""
        return {participant: self._store.read(participant) for participant in participants}

    def calendar(self, participant: str, start: DateTime, end: DateTime) -> List[Event]:
        """Return the participant's events touching ``[start, end]``."""
        if not participant:
            raise InvalidRequestError("userId is required")
        return self._store.events_between(participant, start, end)

    @staticmethod
    def normalize_participants(participants: Sequence[str]) -> List[str]:
        """
        De-duplicate participant ids while keeping request order.
        """
        normalized: List[str] = []
        for participant in participants:
            participant = participant.strip()
            if not participant:
                raise InvalidRequestError("Participant ids must not be empty")
            if participant not in normalized:
                normalized.append(participant)

        if not normalized:
            raise InvalidRequestError("No participants provided.")

        return normalized
