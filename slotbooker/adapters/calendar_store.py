"""
Calendar storage for participants' events.

The store is the only shared mutable state in the application. Reading busy
intervals and appending a new booking must happen as one unit for the
participants involved; ``CalendarStore.lock`` is how callers obtain that unit.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from typing import ContextManager, Dict, Iterable, Iterator, List, Protocol, Sequence

from pendulum import DateTime

from ..domain.models import Event, TimeRange

logger = logging.getLogger(__name__)


class CalendarStore(Protocol):
    """Protocol describing the calendar storage needed by the scheduler."""

    def read(self, participant: str) -> List[TimeRange]:
        """Return the participant's busy intervals ordered by start time."""

    def append(self, participant: str, interval: TimeRange, title: str) -> Event:
        """Record a new busy interval for the participant."""

    def events_between(self, participant: str, start: DateTime, end: DateTime) -> List[Event]:
        """Return the participant's events touching ``[start, end]``."""

    def all_events(self) -> List[Event]:
        """Return every stored event."""

    def lock(self, participants: Sequence[str]) -> ContextManager[None]:
        """
        Serialise a read-then-append unit over the given participants.

        Two units whose participant sets intersect never run concurrently.
        """


class InMemoryCalendarStore:
    """
    Append-only, process-local calendar store.

    A store-wide mutex protects the event list itself, while per-participant
    locks serialise whole scheduling units. Participant locks are always taken
    in sorted order so that overlapping units cannot deadlock.
    """

    def __init__(self, events: Iterable[Event] = ()):
        self._events: List[Event] = list(events)
        self._mutex = threading.Lock()
        self._participant_locks: Dict[str, threading.Lock] = {}

    def read(self, participant: str) -> List[TimeRange]:
        with self._mutex:
            owned = [event for event in self._events if event.participant_id == participant]
        return [event.time_range for event in sorted(owned, key=lambda e: e.start)]

    def append(self, participant: str, interval: TimeRange, title: str) -> Event:
        event = Event(
            id=str(uuid.uuid4()),
            title=title,
            participant_id=participant,
            start=interval.start,
            end=interval.end,
        )
        with self._mutex:
            self._events.append(event)
        logger.debug("Stored event %s for %s at %s", event.id, participant, interval)
        return event

    def events_between(self, participant: str, start: DateTime, end: DateTime) -> List[Event]:
        with self._mutex:
            matching = [
                event for event in self._events
                if event.participant_id == participant
                and event.start <= end
                and event.end >= start
            ]
        return sorted(matching, key=lambda e: e.start)

    def all_events(self) -> List[Event]:
        with self._mutex:
            return list(self._events)

    @contextmanager
    def lock(self, participants: Sequence[str]) -> Iterator[None]:
        locks = [self._lock_for(participant) for participant in sorted(set(participants))]
        acquired: List[threading.Lock] = []
        try:
            for participant_lock in locks:
                participant_lock.acquire()
                acquired.append(participant_lock)
            yield
        finally:
            for participant_lock in reversed(acquired):
                participant_lock.release()

    def _lock_for(self, participant: str) -> threading.Lock:
        with self._mutex:
            if participant not in self._participant_locks:
                self._participant_locks[participant] = threading.Lock()
            return self._participant_locks[participant]

    def __len__(self) -> int:
        with self._mutex:
            return len(self._events)
