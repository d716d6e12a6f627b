"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import Booking, Event, SearchWindow, TimeRange
from .policy import SchedulingPolicy, ScoringWeights
from .slot_finder import SlotFinder
from .slot_scorer import SlotScorer

__all__ = [
    "Booking",
    "Event",
    "SearchWindow",
    "TimeRange",
    "SchedulingPolicy",
    "ScoringWeights",
    "SlotFinder",
    "SlotScorer",
]
