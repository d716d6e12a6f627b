"""
Adapters layer - Calendar storage.
"""

from .calendar_store import CalendarStore, InMemoryCalendarStore

__all__ = ["CalendarStore", "InMemoryCalendarStore"]
