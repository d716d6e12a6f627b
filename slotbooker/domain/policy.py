"""
Named constants for slot enumeration and scoring.

Kept apart from the algorithms so that the exclusion rules and the scoring
weights can be swapped without touching the enumeration code.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SchedulingPolicy:
    """
    Enumeration grid and exclusion rules used by the slot finder.

    The lunch window and the excluded start hour are evaluated independently.
    A slot starting at 12:00 and ending at 12:30 is only caught by the hour
    rule; both rules are kept as they are.
    """
    step_minutes: int = 15
    lunch_start_hour: int = 13
    lunch_end_hour: int = 14
    excluded_start_hour: int = 12
    max_window_days: int = 31


@dataclass(frozen=True)
class ScoringWeights:
    """Additive penalties applied by the slot scorer (lower score wins)."""
    hour_weight: int = 2
    working_start_hour: int = 9
    working_end_hour: int = 17
    off_hours_penalty: int = 20
    buffer_minutes: int = 15
    buffer_penalty: int = 10
    short_gap_minutes: int = 30
    short_gap_penalty: int = 5
