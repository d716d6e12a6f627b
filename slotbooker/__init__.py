"""
slotbooker - find and book a meeting slot that works for every participant.
"""

__version__ = "0.1.0"
