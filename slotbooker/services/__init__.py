"""
Service layer helpers that orchestrate the calendar store and domain logic.
"""

from .meeting_scheduler import DEFAULT_MEETING_TITLE, MeetingScheduler

__all__ = ["DEFAULT_MEETING_TITLE", "MeetingScheduler"]
