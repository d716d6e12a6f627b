"""
Domain-specific exception hierarchy for the slot booking application.
"""


class SlotBookerError(Exception):
    """Base class for all application-level errors."""


class InvalidRequestError(SlotBookerError):
    """Raised when caller input is malformed or out of bounds."""


class SearchWindowTooLargeError(InvalidRequestError):
    """Raised when a search window would require an unbounded enumeration."""


class NoAvailableSlotError(SlotBookerError):
    """Raised when no candidate slot works for all participants."""

    def __init__(self, message: str = "No available time slot found for all participants."):
        super().__init__(message)


class SchedulingContractError(SlotBookerError):
    """Raised when a component is invoked in violation of its preconditions."""


class ConfigError(SlotBookerError):
    """Raised when the configuration file cannot be parsed."""
