"""
Tests for domain models.
"""

import pendulum
import pytest

from slotbooker.domain.models import Booking, Event, SearchWindow, TimeRange


def _at(value: str):
    return pendulum.parse(value)


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = _at("2025-08-02T09:00:00Z")
        end = _at("2025-08-02T17:00:00Z")

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end
        assert tr.duration_minutes() == 480

    def test_invalid_time_range_raises_error(self):
        """Test that creating an inverted time range raises ValueError."""
        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=_at("2025-08-02T17:00:00Z"), end=_at("2025-08-02T09:00:00Z"))

    def test_zero_length_range_raises_error(self):
        with pytest.raises(ValueError):
            TimeRange(start=_at("2025-08-02T09:00:00Z"), end=_at("2025-08-02T09:00:00Z"))

    def test_overlaps(self):
        """Test half-open overlap detection."""
        tr1 = TimeRange(start=_at("2025-08-02T09:00:00Z"), end=_at("2025-08-02T12:00:00Z"))
        tr2 = TimeRange(start=_at("2025-08-02T11:00:00Z"), end=_at("2025-08-02T14:00:00Z"))
        tr3 = TimeRange(start=_at("2025-08-02T14:00:00Z"), end=_at("2025-08-02T17:00:00Z"))

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)
        # Touching ranges do not overlap
        assert not tr2.overlaps(tr3)
        assert not tr3.overlaps(tr2)

    def test_overlaps_across_timezones(self):
        """Ranges expressed in different offsets compare by instant."""
        utc = TimeRange(start=_at("2025-08-02T09:00:00Z"), end=_at("2025-08-02T10:00:00Z"))
        ist = TimeRange(start=_at("2025-08-02T15:00:00+05:30"), end=_at("2025-08-02T16:00:00+05:30"))

        assert utc.overlaps(ist)


class TestSearchWindow:
    """Tests for SearchWindow model."""

    def test_inverted_window_is_allowed_and_empty(self):
        window = SearchWindow(start=_at("2025-08-02T17:00:00Z"), end=_at("2025-08-02T09:00:00Z"))

        assert window.is_empty()
        assert window.span_minutes() == 0

    def test_span_minutes(self):
        window = SearchWindow(start=_at("2025-08-02T09:00:00Z"), end=_at("2025-08-02T17:00:00Z"))

        assert not window.is_empty()
        assert window.span_minutes() == 480


class TestBooking:
    """Tests for Booking and Event models."""

    def test_event_time_range(self):
        event = Event(
            id="e1",
            title="Existing Meeting",
            participant_id="u1",
            start=_at("2025-08-02T14:00:00Z"),
            end=_at("2025-08-02T15:00:00Z"),
        )

        assert event.time_range == TimeRange(start=event.start, end=event.end)

    def test_format_display(self):
        booking = Booking(
            meeting_id="m1",
            title="New Meeting",
            participants=["u1", "u2"],
            slot=TimeRange(start=_at("2025-08-02T10:00:00Z"), end=_at("2025-08-02T11:00:00Z")),
        )

        display = booking.format_display("UTC")

        assert "Saturday" in display
        assert "2025-08-02" in display
        assert "10:00 - 11:00" in display
        assert "(60 min)" in display

    def test_format_display_converts_timezone(self):
        booking = Booking(
            meeting_id="m1",
            title="New Meeting",
            participants=["u1"],
            slot=TimeRange(start=_at("2025-08-02T10:00:00Z"), end=_at("2025-08-02T11:00:00Z")),
        )

        assert "15:30 - 16:30" in booking.format_display("Asia/Kolkata")
