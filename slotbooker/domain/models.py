"""
Domain models for time ranges, search windows and bookings.
"""

from dataclasses import dataclass, field
from typing import List

from pendulum import DateTime


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range ``[start, end)``.

    Used both for participants' busy intervals and for candidate slots.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class SearchWindow:
    """
    Bounds within which candidate slots are enumerated.

    Unlike ``TimeRange`` there is no ordering check: an inverted window is
    legal and simply produces no candidates.
    """
    start: DateTime
    end: DateTime

    def is_empty(self) -> bool:
        return self.start > self.end

    def span_minutes(self) -> int:
        if self.is_empty():
            return 0
        return int((self.end - self.start).total_seconds() / 60)


@dataclass(frozen=True)
class Event:
    """A calendar entry owned by a single participant."""
    id: str
    title: str
    participant_id: str
    start: DateTime
    end: DateTime

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)


@dataclass
class Booking:
    """
    A selected slot handed back to the caller together with its participants.
    """
    meeting_id: str
    title: str
    participants: List[str]
    slot: TimeRange
    events: List[Event] = field(default_factory=list)

    def format_display(self, timezone: str = "UTC") -> str:
        """
        Format the booking for display.
        Format: Weekday, YYYY-MM-DD | HH:mm - HH:mm (N min)
        """
        start = self.slot.start.in_timezone(timezone)
        end = self.slot.end.in_timezone(timezone)

        weekday = start.format("dddd")
        date_str = start.format("YYYY-MM-DD")
        time_str = f"{start.format('HH:mm')} - {end.format('HH:mm')} ({timezone})"
        duration = self.slot.duration_minutes()

        return f"{weekday}, {date_str} | {time_str} ({duration} min)"
