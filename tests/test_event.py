"""Unit tests for the Event model."""
import pytest
from datetime import date, datetime, time

from multical.event import (
    EventStatus, create_timed_event, create_all_day_event,
    parse_datetime, parse_date, format_datetime,
)
from tests.helpers import dt


class TestEventIdentity:
    """Test cases for event equality and hashing."""

    def test_equality_uses_subject_start_end_only(self):
        """Events with the same triple are equal whatever their other fields."""
        a = create_timed_event("Meeting", dt("2025-05-05T10:00"), dt("2025-05-05T11:00"),
                               description="one", location="Room 1")
        b = create_timed_event("Meeting", dt("2025-05-05T10:00"), dt("2025-05-05T11:00"),
                               description="two", status=EventStatus.PRIVATE)

        assert a == b
        assert hash(a) == hash(b)
        assert a.conflicts_with(b)
        assert len({a, b}) == 1

    def test_different_end_is_a_different_event(self):
        a = create_timed_event("Meeting", dt("2025-05-05T10:00"), dt("2025-05-05T11:00"))
        b = create_timed_event("Meeting", dt("2025-05-05T10:00"), dt("2025-05-05T12:00"))

        assert a != b
        assert not a.conflicts_with(b)

    def test_key_and_duration(self):
        event = create_timed_event("Meeting", dt("2025-05-05T10:00"), dt("2025-05-05T11:30"))

        assert event.key == ("Meeting", dt("2025-05-05T10:00"), dt("2025-05-05T11:30"))
        assert event.duration.total_seconds() == 90 * 60


class TestEventStatus:
    """Test cases for status defaults."""

    def test_timed_event_defaults_to_public(self):
        event = create_timed_event("Meeting", dt("2025-05-05T10:00"), dt("2025-05-05T11:00"))
        assert event.status == EventStatus.PUBLIC

    def test_timed_event_explicit_none_is_private(self):
        event = create_timed_event("Meeting", dt("2025-05-05T10:00"), dt("2025-05-05T11:00"),
                                   status=None)
        assert event.status == EventStatus.PRIVATE

    def test_all_day_event_explicit_none_is_public(self):
        event = create_all_day_event("Holiday", date(2025, 5, 5), status=None)
        assert event.status == EventStatus.PUBLIC

    @pytest.mark.parametrize("text,expected", [
        ("public", EventStatus.PUBLIC),
        ("PUBLIC", EventStatus.PUBLIC),
        ("private", EventStatus.PRIVATE),
        ("busy", EventStatus.PRIVATE),
    ])
    def test_from_text(self, text, expected):
        assert EventStatus.from_text(text) == expected


class TestAllDayEvent:
    """Test cases for all-day events."""

    def test_spans_eight_to_five(self):
        event = create_all_day_event("Holiday", date(2025, 5, 5))

        assert event.all_day
        assert event.start == dt("2025-05-05T08:00")
        assert event.end == dt("2025-05-05T17:00")

    def test_custom_window(self):
        event = create_all_day_event("Holiday", date(2025, 5, 5),
                                     day_start=time(9, 0), day_end=time(18, 0))

        assert event.start == dt("2025-05-05T09:00")
        assert event.end == dt("2025-05-05T18:00")


class TestEventTimeTests:
    """Test cases for date and busy checks."""

    def test_is_active_at_is_half_open(self):
        event = create_timed_event("Meeting", dt("2025-05-05T10:00"), dt("2025-05-05T11:00"))

        assert event.is_active_at(dt("2025-05-05T10:00"))
        assert event.is_active_at(dt("2025-05-05T10:59"))
        assert not event.is_active_at(dt("2025-05-05T11:00"))
        assert not event.is_active_at(dt("2025-05-05T09:59"))

    def test_occurs_on_each_spanned_date(self):
        event = create_timed_event("Late", dt("2025-05-05T23:00"), dt("2025-05-06T01:00"))

        assert event.occurs_on_date(date(2025, 5, 5))
        assert event.occurs_on_date(date(2025, 5, 6))
        assert not event.occurs_on_date(date(2025, 5, 7))

    def test_str_summary(self):
        event = create_timed_event("Meeting", dt("2025-05-05T09:00"), dt("2025-05-05T10:30"),
                                   location="Room 1")
        assert str(event) == "• Meeting (May 05, 9:00 - 10:30) at Room 1"

    def test_str_all_day_without_location(self):
        event = create_all_day_event("Holiday", date(2025, 5, 5), location="  ")
        assert str(event) == "• Holiday (May 05, All Day)"


class TestParsing:
    """Test cases for boundary text formats."""

    def test_parse_datetime(self):
        assert parse_datetime("2025-05-20T08:00") == datetime(2025, 5, 20, 8, 0)

    def test_parse_datetime_passes_datetimes_through(self):
        value = datetime(2025, 5, 20, 8, 0)
        assert parse_datetime(value) is value

    @pytest.mark.parametrize("text", ["2025-05-20 08:00", "yesterday", "", None])
    def test_parse_datetime_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            parse_datetime(text)

    def test_parse_date(self):
        assert parse_date("2025-05-20") == date(2025, 5, 20)
        with pytest.raises(ValueError):
            parse_date("20/05/2025")

    def test_format_datetime(self):
        assert format_datetime(datetime(2025, 5, 20, 8, 0)) == "2025-05-20T08:00"
