"""
Tests for the MeetingScheduler orchestration layer.
"""

import threading
from typing import List

import pendulum
import pytest

from slotbooker.adapters.calendar_store import InMemoryCalendarStore
from slotbooker.domain.exceptions import (
    InvalidRequestError,
    NoAvailableSlotError,
    SearchWindowTooLargeError,
)
from slotbooker.domain.models import Event, SearchWindow
from slotbooker.domain.slot_finder import SlotFinder
from slotbooker.domain.slot_scorer import SlotScorer
from slotbooker.services.meeting_scheduler import MeetingScheduler


def _window(start: str, end: str) -> SearchWindow:
    return SearchWindow(start=pendulum.parse(start), end=pendulum.parse(end))


def _event(event_id: str, participant: str, start: str, end: str) -> Event:
    return Event(
        id=event_id,
        title="Existing Meeting",
        participant_id=participant,
        start=pendulum.parse(start),
        end=pendulum.parse(end),
    )


def _build_scheduler(events: List[Event] = ()) -> MeetingScheduler:
    return MeetingScheduler(
        store=InMemoryCalendarStore(events),
        slot_finder=SlotFinder(),
        slot_scorer=SlotScorer(),
    )


class TestSchedule:
    """Tests for booking a meeting."""

    def test_books_earliest_best_slot_for_all_participants(self):
        scheduler = _build_scheduler([
            _event("e1", "u1", "2025-08-02T14:00:00Z", "2025-08-02T15:00:00Z"),
        ])

        booking = scheduler.schedule(
            participants=["u1", "u2"],
            window=_window("2025-08-02T09:00:00Z", "2025-08-02T17:00:00Z"),
            duration_minutes=60,
        )

        assert booking.slot.start == pendulum.parse("2025-08-02T09:00:00Z")
        assert booking.slot.end == pendulum.parse("2025-08-02T10:00:00Z")
        assert booking.participants == ["u1", "u2"]
        assert booking.title == "New Meeting"
        assert booking.meeting_id
        assert [e.participant_id for e in booking.events] == ["u1", "u2"]

    def test_booked_slot_becomes_busy(self):
        scheduler = _build_scheduler()
        window = _window("2025-08-02T09:00:00Z", "2025-08-02T17:00:00Z")

        first = scheduler.schedule(participants=["u1"], window=window, duration_minutes=60)
        second = scheduler.schedule(participants=["u1"], window=window, duration_minutes=60)

        assert not first.slot.overlaps(second.slot)
        assert len(scheduler.fetch_busy_times(["u1"])["u1"]) == 2

    def test_duplicate_participants_are_booked_once(self):
        scheduler = _build_scheduler()

        booking = scheduler.schedule(
            participants=["u1", "u2", "u1"],
            window=_window("2025-08-02T09:00:00Z", "2025-08-02T17:00:00Z"),
            duration_minutes=30,
            title="Sync",
        )

        assert booking.participants == ["u1", "u2"]
        assert len(booking.events) == 2
        assert booking.title == "Sync"

    def test_no_slot_raises_conflict(self):
        scheduler = _build_scheduler([
            _event("e1", "u1", "2025-08-02T09:00:00Z", "2025-08-02T17:00:00Z"),
        ])

        with pytest.raises(NoAvailableSlotError, match="No available time slot"):
            scheduler.schedule(
                participants=["u1", "u2"],
                window=_window("2025-08-02T09:00:00Z", "2025-08-02T17:00:00Z"),
                duration_minutes=30,
            )

    def test_window_narrower_than_duration_is_a_conflict(self):
        scheduler = _build_scheduler()

        with pytest.raises(NoAvailableSlotError):
            scheduler.schedule(
                participants=["u1"],
                window=_window("2025-08-02T09:00:00Z", "2025-08-02T09:30:00Z"),
                duration_minutes=60,
            )

    def test_conflict_books_nothing(self):
        scheduler = _build_scheduler()

        with pytest.raises(NoAvailableSlotError):
            scheduler.schedule(
                participants=["u1"],
                window=_window("2025-08-02T12:00:00Z", "2025-08-02T12:45:00Z"),
                duration_minutes=30,
            )

        assert scheduler.fetch_busy_times(["u1"]) == {"u1": []}

    @pytest.mark.parametrize("duration", [0, -15])
    def test_rejects_non_positive_duration(self, duration):
        scheduler = _build_scheduler()

        with pytest.raises(InvalidRequestError):
            scheduler.schedule(
                participants=["u1"],
                window=_window("2025-08-02T09:00:00Z", "2025-08-02T17:00:00Z"),
                duration_minutes=duration,
            )

    @pytest.mark.parametrize("participants", [[], ["  "]])
    def test_rejects_missing_participants(self, participants):
        scheduler = _build_scheduler()

        with pytest.raises(InvalidRequestError):
            scheduler.schedule(
                participants=participants,
                window=_window("2025-08-02T09:00:00Z", "2025-08-02T17:00:00Z"),
                duration_minutes=30,
            )

    def test_rejects_oversized_window(self):
        scheduler = _build_scheduler()

        with pytest.raises(SearchWindowTooLargeError):
            scheduler.schedule(
                participants=["u1"],
                window=_window("2025-01-01T00:00:00Z", "2025-12-31T00:00:00Z"),
                duration_minutes=30,
            )

    def test_concurrent_requests_never_double_book(self):
        """Parallel bookings for the same people must not overlap."""
        scheduler = _build_scheduler()
        window = _window("2025-08-02T09:00:00Z", "2025-08-02T12:00:00Z")
        outcomes: List[str] = []
        outcomes_lock = threading.Lock()

        def book():
            try:
                scheduler.schedule(participants=["u1", "u2"], window=window, duration_minutes=60)
                result = "booked"
            except NoAvailableSlotError:
                result = "conflict"
            with outcomes_lock:
                outcomes.append(result)

        threads = [threading.Thread(target=book) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert len(outcomes) == 8
        assert "booked" in outcomes

        for participant, busy in scheduler.fetch_busy_times(["u1", "u2"]).items():
            assert len(busy) == outcomes.count("booked")
            for i, first in enumerate(busy):
                for second in busy[i + 1:]:
                    assert not first.overlaps(second), participant


class TestCalendar:
    """Tests for calendar lookups."""

    def test_calendar_lists_booked_events(self):
        scheduler = _build_scheduler([
            _event("e1", "u1", "2025-08-02T14:00:00Z", "2025-08-02T15:00:00Z"),
        ])
        scheduler.schedule(
            participants=["u1"],
            window=_window("2025-08-02T09:00:00Z", "2025-08-02T17:00:00Z"),
            duration_minutes=60,
        )

        events = scheduler.calendar(
            "u1",
            pendulum.parse("2025-08-02T00:00:00Z"),
            pendulum.parse("2025-08-02T23:59:59Z"),
        )

        assert [e.title for e in events] == ["New Meeting", "Existing Meeting"]

    def test_calendar_requires_participant(self):
        scheduler = _build_scheduler()

        with pytest.raises(InvalidRequestError):
            scheduler.calendar("", pendulum.parse("2025-08-02T00:00:00Z"), pendulum.parse("2025-08-03T00:00:00Z"))
