"""
Event model for multical.

An Event is a single calendar occurrence, timed or all-day. Its identity is
the (subject, start, end) triple: two events with the same triple are the
same event as far as a calendar is concerned, whatever their other fields.
Times are naive and belong to the timezone of the calendar holding the event.
"""

from dataclasses import dataclass
from datetime import datetime, date, time, timedelta
from enum import Enum
from typing import Optional


DATETIME_FORMAT = "%Y-%m-%dT%H:%M"
DATE_FORMAT = "%Y-%m-%d"

ALL_DAY_START = time(8, 0)
ALL_DAY_END = time(17, 0)


class EventStatus(Enum):
    """Visibility of an event."""
    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def from_text(cls, text: str) -> 'EventStatus':
        """'public' (any case) maps to PUBLIC, anything else to PRIVATE."""
        if text is not None and str(text).strip().lower() == "public":
            return cls.PUBLIC
        return cls.PRIVATE


def parse_datetime(value) -> datetime:
    """
    Parse a boundary datetime ('YYYY-MM-DDTHH:MM').

    datetime objects are passed through unchanged.

    Raises:
        ValueError: on malformed text.
    """
    if isinstance(value, datetime):
        return value
    if value is None:
        raise ValueError("Missing datetime value")
    return datetime.strptime(str(value).strip(), DATETIME_FORMAT)


def parse_date(value) -> date:
    """Parse a boundary date ('YYYY-MM-DD'). Raises ValueError on bad input."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None:
        raise ValueError("Missing date value")
    return datetime.strptime(str(value).strip(), DATE_FORMAT).date()


def format_datetime(dt: datetime) -> str:
    return dt.strftime(DATETIME_FORMAT)


@dataclass
class Event:
    """
    One calendar occurrence.

    Mutable so that edits can be applied in place, but only a CalendarInstance
    should mutate the triple fields: it keeps its index keyed on them.
    """
    subject: str
    start: datetime
    end: datetime
    description: Optional[str] = None
    location: Optional[str] = None
    status: EventStatus = EventStatus.PUBLIC
    all_day: bool = False
    series_id: Optional[str] = None  # None if not part of a series

    # ==================== Convenience Properties ====================

    @property
    def key(self) -> tuple:
        """The identity triple (subject, start, end)."""
        return (self.subject, self.start, self.end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_series_member(self) -> bool:
        return self.series_id is not None

    # ==================== Time Tests ====================

    def conflicts_with(self, other: 'Event') -> bool:
        """Two events conflict when their identity triples are equal."""
        return self.key == other.key

    def occurs_on_date(self, day: date) -> bool:
        """True if day lies within [start date, end date], inclusive."""
        return self.start.date() <= day <= self.end.date()

    def is_active_at(self, instant: datetime) -> bool:
        """True if instant lies in [start, end): an event ending at instant is not active."""
        return self.start <= instant < self.end

    def overlaps(self, range_start: datetime, range_end: datetime) -> bool:
        """Inclusive overlap with [range_start, range_end]."""
        return self.end >= range_start and self.start <= range_end

    # ==================== Identity ====================

    def __hash__(self):
        return hash(self.key)

    def __eq__(self, other):
        if isinstance(other, Event):
            return self.key == other.key
        return NotImplemented

    def __str__(self):
        date_str = self.start.strftime("%b %d")
        if self.all_day:
            time_str = "All Day"
        else:
            time_str = f"{self.start.hour}:{self.start.minute:02d} - {self.end.hour}:{self.end.minute:02d}"
        location_str = f" at {self.location}" if self.location and self.location.strip() else ""
        return f"• {self.subject} ({date_str}, {time_str}){location_str}"


def create_timed_event(
    subject: str,
    start: datetime,
    end: datetime,
    description: Optional[str] = None,
    location: Optional[str] = None,
    status: Optional[EventStatus] = EventStatus.PUBLIC,
    series_id: Optional[str] = None,
) -> Event:
    """
    Create a timed event.

    A status that is not given defaults to PUBLIC; an explicit None means
    PRIVATE.
    """
    if status is None:
        status = EventStatus.PRIVATE
    return Event(
        subject=subject,
        start=start,
        end=end,
        description=description,
        location=location,
        status=status,
        all_day=False,
        series_id=series_id,
    )


def create_all_day_event(
    subject: str,
    day: date,
    description: Optional[str] = None,
    location: Optional[str] = None,
    status: Optional[EventStatus] = EventStatus.PUBLIC,
    series_id: Optional[str] = None,
    day_start: time = ALL_DAY_START,
    day_end: time = ALL_DAY_END,
) -> Event:
    """
    Create an all-day event spanning day_start..day_end on the given date.

    Both a missing and an explicit None status give PUBLIC.
    """
    if status is None:
        status = EventStatus.PUBLIC
    if isinstance(day, datetime):
        day = day.date()
    return Event(
        subject=subject,
        start=datetime.combine(day, day_start),
        end=datetime.combine(day, day_end),
        description=description,
        location=location,
        status=status,
        all_day=True,
        series_id=series_id,
    )
