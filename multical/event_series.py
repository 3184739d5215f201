"""
Weekly recurrence metadata for multical.

An EventSeries only describes how a batch of events was generated; the
generated events live on their own and are never regenerated from it.
"""

from dataclasses import dataclass
from datetime import time
from enum import IntEnum
from typing import Iterable

from icalendar import vRecur


class Weekday(IntEnum):
    """Days of the week, numbered like date.weekday()."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def from_code(cls, code: str) -> 'Weekday':
        """Map a one-letter code (M T W R F S U) to a Weekday."""
        try:
            return _CODES[code.upper()]
        except (KeyError, AttributeError):
            raise ValueError(f"Unknown weekday code: {code!r}")

    @property
    def code(self) -> str:
        return _LETTERS[self.value]

    @property
    def ical_code(self) -> str:
        """Two-letter iCalendar BYDAY code (MO, TU, ...)."""
        return self.name[:2]


_LETTERS = "MTWRFSU"
_CODES = {letter: Weekday(i) for i, letter in enumerate(_LETTERS)}


def parse_weekdays(codes: str) -> frozenset[Weekday]:
    """
    Parse a weekday code string such as 'MWF' or 'TR'.

    Raises:
        ValueError: on an empty string or an unknown letter.
    """
    if not codes:
        raise ValueError("No weekdays given")
    return frozenset(Weekday.from_code(c) for c in codes.strip())


def normalize_weekdays(weekdays: Iterable) -> frozenset[Weekday]:
    """Accept Weekday members, ints 0..6 or one-letter codes."""
    result = set()
    for day in weekdays:
        if isinstance(day, str):
            result.add(Weekday.from_code(day))
        else:
            result.add(Weekday(int(day)))
    return frozenset(result)


@dataclass(frozen=True)
class EventSeries:
    """Recurrence metadata keyed by series id."""
    series_id: str
    weekdays: frozenset[Weekday]
    start_time: time
    end_time: time
    all_day: bool = False

    @property
    def weekday_codes(self) -> str:
        """Weekdays as boundary codes in Monday-first order, e.g. 'MW'."""
        return "".join(day.code for day in sorted(self.weekdays))

    @property
    def rrule(self) -> vRecur:
        """The weekly pattern as an iCalendar recurrence rule (FREQ=WEEKLY;BYDAY=...)."""
        return vRecur(freq='WEEKLY', byday=[day.ical_code for day in sorted(self.weekdays)])

    def includes(self, weekday: int) -> bool:
        return weekday in self.weekdays

    def __hash__(self):
        return hash(self.series_id)

    def __eq__(self, other):
        if isinstance(other, EventSeries):
            return self.series_id == other.series_id
        return NotImplemented

    def __repr__(self):
        return (f"EventSeries(series_id={self.series_id!r}, weekdays={self.weekday_codes!r}, "
                f"start_time={self.start_time}, end_time={self.end_time}, all_day={self.all_day})")


class SeriesIdGenerator:
    """
    Monotonically increasing series id sequence.

    A CalendarManager shares one generator between all of its calendars so
    that series ids are unique manager-wide.
    """

    def __init__(self, prefix: str = "series-", start: int = 0):
        self.prefix = prefix
        self._counter = start

    def next_id(self) -> str:
        self._counter += 1
        return f"{self.prefix}{self._counter}"

    @property
    def last_value(self) -> int:
        return self._counter
