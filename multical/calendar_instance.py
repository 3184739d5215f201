"""
Calendar instance storing Event objects for one named, timezone-scoped calendar.

Owns duplicate detection, weekly series materialization, date/range/busy
queries and the three edit scopes (single event, forward from an event,
entire series).
"""

from datetime import datetime, date, time, timedelta
from typing import Callable, Iterable, Optional

import pytz

from .event import (
    Event, EventStatus, create_timed_event, create_all_day_event,
    parse_datetime, ALL_DAY_START, ALL_DAY_END,
)
from .event_series import EventSeries, SeriesIdGenerator, Weekday, normalize_weekdays
from .timezone_utils import TimezoneLike, resolve_timezone, zone_name
from . import debug


EDITABLE_PROPERTIES = ("subject", "start", "end", "description", "location", "status")


def _debug_print(msg: str) -> None:
    debug.emit("CALENDAR", msg)


class CalendarInstance:
    """
    One named calendar holding events in its own timezone.

    Events are indexed by their (subject, start, end) triple; no two stored
    events ever share a triple.
    """

    def __init__(
        self,
        name: str,
        timezone: TimezoneLike,
        id_generator: Optional[SeriesIdGenerator] = None,
        all_day_start: time = ALL_DAY_START,
        all_day_end: time = ALL_DAY_END,
    ):
        """
        Args:
            name: Calendar name, unique within its manager
            timezone: IANA zone name or pytz zone (raises UnknownTimeZoneError if invalid)
            id_generator: Series id source; shared by all calendars of a manager
            all_day_start: Start time used for all-day events
            all_day_end: End time used for all-day events
        """
        self.name = name
        self._timezone = resolve_timezone(timezone)
        self._id_generator = id_generator or SeriesIdGenerator()
        self.all_day_start = all_day_start
        self.all_day_end = all_day_end

        # (subject, start, end) -> Event
        self._events: dict[tuple, Event] = {}
        # series_id -> EventSeries, for series created in this calendar
        self._series: dict[str, EventSeries] = {}

    # ==================== Properties ====================

    @property
    def timezone(self) -> pytz.BaseTzInfo:
        return self._timezone

    @timezone.setter
    def timezone(self, value: TimezoneLike):
        self._timezone = resolve_timezone(value)

    @property
    def timezone_name(self) -> str:
        return zone_name(self._timezone)

    @property
    def id_generator(self) -> SeriesIdGenerator:
        return self._id_generator

    def __len__(self) -> int:
        return len(self._events)

    # ==================== Insertion ====================

    def has_conflict(self, event: Event) -> bool:
        """Check whether an event with the same triple is already stored."""
        return event.key in self._events

    def add_event(self, event: Event) -> bool:
        """
        Insert an event unless it duplicates a stored one.

        This is the single entry point for new events, used by creation and
        by cross-calendar copies.
        """
        if self.has_conflict(event):
            _debug_print(f"{self.name}: duplicate event rejected: {event.subject!r} "
                         f"{event.start} -> {event.end}")
            return False
        self._events[event.key] = event
        return True

    def create_event(
        self,
        subject: str,
        start: datetime,
        end: datetime,
        description: Optional[str] = None,
        location: Optional[str] = None,
        status: Optional[EventStatus] = EventStatus.PUBLIC,
    ) -> bool:
        """Create a timed event. Fails if end is before start or on a duplicate."""
        if end < start:
            _debug_print(f"{self.name}: rejected {subject!r}, end {end} before start {start}")
            return False
        event = create_timed_event(subject, start, end, description, location, status)
        return self.add_event(event)

    def create_all_day_event(
        self,
        subject: str,
        day: date,
        description: Optional[str] = None,
        location: Optional[str] = None,
        status: Optional[EventStatus] = EventStatus.PUBLIC,
    ) -> bool:
        """Create an all-day event on the given date."""
        return self.add_event(self.make_all_day_event(subject, day, description, location, status))

    def make_all_day_event(self, subject, day, description=None, location=None,
                           status=EventStatus.PUBLIC, series_id=None) -> Event:
        """Build (without storing) an all-day event using this calendar's all-day window."""
        return create_all_day_event(
            subject, day, description, location, status,
            series_id=series_id,
            day_start=self.all_day_start,
            day_end=self.all_day_end,
        )

    # ==================== Series Materialization ====================

    def create_event_series(
        self,
        subject: str,
        start: datetime,
        end: datetime,
        weekdays: Iterable,
        occurrences: int,
        description: Optional[str] = None,
        location: Optional[str] = None,
        status: Optional[EventStatus] = EventStatus.PUBLIC,
    ) -> bool:
        """Create a timed series stopping after the given number of occurrences."""
        start_time, end_time = start.time(), end.time()

        def build(day: date, series_id: str) -> Event:
            return create_timed_event(
                subject,
                datetime.combine(day, start_time),
                datetime.combine(day, end_time),
                description, location, status,
                series_id=series_id,
            )

        return self._materialize(build, start.date(), weekdays, start_time, end_time,
                                 all_day=False, occurrences=occurrences)

    def create_event_series_until(
        self,
        subject: str,
        start: datetime,
        end: datetime,
        weekdays: Iterable,
        end_date: date,
        description: Optional[str] = None,
        location: Optional[str] = None,
        status: Optional[EventStatus] = EventStatus.PUBLIC,
    ) -> bool:
        """Create a timed series running through end_date (inclusive)."""
        start_time, end_time = start.time(), end.time()

        def build(day: date, series_id: str) -> Event:
            return create_timed_event(
                subject,
                datetime.combine(day, start_time),
                datetime.combine(day, end_time),
                description, location, status,
                series_id=series_id,
            )

        return self._materialize(build, start.date(), weekdays, start_time, end_time,
                                 all_day=False, end_date=end_date)

    def create_all_day_event_series(
        self,
        subject: str,
        start_date: date,
        weekdays: Iterable,
        occurrences: int,
        description: Optional[str] = None,
        location: Optional[str] = None,
        status: Optional[EventStatus] = EventStatus.PUBLIC,
    ) -> bool:
        """Create an all-day series stopping after the given number of occurrences."""
        def build(day: date, series_id: str) -> Event:
            return self.make_all_day_event(subject, day, description, location, status, series_id)

        return self._materialize(build, start_date, weekdays, self.all_day_start,
                                 self.all_day_end, all_day=True, occurrences=occurrences)

    def create_all_day_event_series_until(
        self,
        subject: str,
        start_date: date,
        weekdays: Iterable,
        end_date: date,
        description: Optional[str] = None,
        location: Optional[str] = None,
        status: Optional[EventStatus] = EventStatus.PUBLIC,
    ) -> bool:
        """Create an all-day series running through end_date (inclusive)."""
        def build(day: date, series_id: str) -> Event:
            return self.make_all_day_event(subject, day, description, location, status, series_id)

        return self._materialize(build, start_date, weekdays, self.all_day_start,
                                 self.all_day_end, all_day=True, end_date=end_date)

    def _materialize(
        self,
        build: Callable[[date, str], Event],
        anchor: date,
        weekdays: Iterable,
        start_time: time,
        end_time: time,
        all_day: bool,
        occurrences: Optional[int] = None,
        end_date: Optional[date] = None,
    ) -> bool:
        """
        Generate a batch of series members and commit it all or nothing.

        Walks the calendar day by day from the anchor date. Every date whose
        weekday is in the set yields a candidate, which is checked against
        the stored events and against the candidates already staged. Any
        conflict aborts the whole batch.

        Exactly one of occurrences / end_date bounds the walk.
        """
        if isinstance(anchor, datetime):
            anchor = anchor.date()
        if isinstance(end_date, datetime):
            end_date = end_date.date()

        days = normalize_weekdays(weekdays)
        if occurrences is not None:
            if occurrences < 0:
                _debug_print(f"{self.name}: negative occurrence count {occurrences}")
                return False
            if occurrences > 0 and not days:
                _debug_print(f"{self.name}: series with {occurrences} occurrences but no weekdays")
                return False

        series_id = self._id_generator.next_id()
        staged: dict[tuple, Event] = {}
        current = anchor

        while True:
            if occurrences is not None and len(staged) >= occurrences:
                break
            if end_date is not None and current > end_date:
                break

            if Weekday(current.weekday()) in days:
                candidate = build(current, series_id)
                if candidate.key in self._events or candidate.key in staged:
                    _debug_print(f"{self.name}: series {series_id} aborted, "
                                 f"conflict on {candidate.subject!r} at {candidate.start}")
                    return False
                staged[candidate.key] = candidate

            if current == end_date or current == date.max:
                break
            current += timedelta(days=1)

        self._series[series_id] = EventSeries(series_id, days, start_time, end_time, all_day)
        self._events.update(staged)
        _debug_print(f"{self.name}: series {series_id} created with {len(staged)} events")
        return True

    # ==================== Lookup ====================

    def find_event(self, subject: str, start: datetime, end: datetime) -> Optional[Event]:
        """Find an event by its exact (subject, start, end) triple."""
        return self._events.get((subject, start, end))

    def find_event_by_subject_and_start(self, subject: str, start: datetime) -> Optional[Event]:
        """Find an event by subject and start; the earliest-ending one wins on ties."""
        matches = [e for e in self._events.values()
                   if e.subject == subject and e.start == start]
        if not matches:
            return None
        return min(matches, key=lambda e: e.end)

    def get_all_events(self) -> set[Event]:
        return set(self._events.values())

    def get_series(self, series_id: str) -> Optional[EventSeries]:
        return self._series.get(series_id)

    def get_all_series(self) -> list[EventSeries]:
        return list(self._series.values())

    def get_series_members(self, series_id: str) -> list[Event]:
        """Get all stored events carrying a series id, sorted by start."""
        return sorted((e for e in self._events.values() if e.series_id == series_id),
                      key=lambda e: e.start)

    # ==================== Queries ====================

    def get_events_on_date(self, day: date) -> list[Event]:
        """Events whose [start date, end date] span contains the date, sorted by start."""
        if isinstance(day, datetime):
            day = day.date()
        events = [e for e in self._events.values() if e.occurs_on_date(day)]
        events.sort(key=lambda e: e.start)
        return events

    def get_events_in_range(self, start: datetime, end: datetime) -> list[Event]:
        """Events overlapping [start, end] (inclusive on both ends), sorted by start."""
        events = [e for e in self._events.values() if e.overlaps(start, end)]
        events.sort(key=lambda e: e.start)
        return events

    def is_busy(self, instant: datetime) -> bool:
        """True if some event is active at the instant (start inclusive, end exclusive)."""
        return any(e.is_active_at(instant) for e in self._events.values())

    # ==================== Editing ====================

    def edit_event(
        self,
        property_name: str,
        subject: str,
        start: datetime,
        end: datetime,
        new_value,
    ) -> bool:
        """Edit one event located by its exact triple."""
        prop = self._check_property(property_name)
        if prop is None:
            return False

        event = self.find_event(subject, start, end)
        if event is None:
            _debug_print(f"{self.name}: edit_event: no event {subject!r} {start} -> {end}")
            return False

        return self._update_event_property(event, prop, new_value)

    def edit_events_from_date(
        self,
        property_name: str,
        subject: str,
        start: datetime,
        new_value,
    ) -> bool:
        """
        Edit an event and every later member of its series.

        A standalone anchor event is edited on its own.
        """
        prop = self._check_property(property_name)
        if prop is None:
            return False

        anchor = self.find_event_by_subject_and_start(subject, start)
        if anchor is None:
            _debug_print(f"{self.name}: edit_events_from_date: no event {subject!r} at {start}")
            return False

        if anchor.series_id is None:
            return self._update_event_property(anchor, prop, new_value)

        members = [e for e in self.get_series_members(anchor.series_id)
                   if e.start >= anchor.start]
        return self._update_members(members, prop, new_value)

    def edit_entire_series(
        self,
        property_name: str,
        subject: str,
        start: datetime,
        new_value,
    ) -> bool:
        """Edit every member of the series the located event belongs to."""
        prop = self._check_property(property_name)
        if prop is None:
            return False

        anchor = self.find_event_by_subject_and_start(subject, start)
        if anchor is None:
            _debug_print(f"{self.name}: edit_entire_series: no event {subject!r} at {start}")
            return False

        if anchor.series_id is None:
            return self._update_event_property(anchor, prop, new_value)

        return self._update_members(self.get_series_members(anchor.series_id), prop, new_value)

    def _check_property(self, property_name: str) -> Optional[str]:
        prop = (property_name or "").strip().lower()
        if prop not in EDITABLE_PROPERTIES:
            _debug_print(f"{self.name}: unknown property {property_name!r}")
            return None
        return prop

    def _update_members(self, members: list[Event], prop: str, new_value) -> bool:
        """
        Apply one edit to several events in start order.

        Stops at the first member that cannot be edited; members already
        edited keep their new value.
        """
        if not members:
            return False
        for event in members:
            if not self._update_event_property(event, prop, new_value):
                return False
        return True

    def _update_event_property(self, event: Event, prop: str, new_value) -> bool:
        """
        Set one property on a stored event, keeping the triple index valid.

        A start change detaches the event from its series. An edit that would
        give the event the triple of another stored event is refused.
        """
        if prop in ("subject", "start", "end"):
            try:
                if prop == "subject":
                    new_key = (new_value, event.start, event.end)
                elif prop == "start":
                    new_key = (event.subject, parse_datetime(new_value), event.end)
                else:
                    new_key = (event.subject, event.start, parse_datetime(new_value))
            except ValueError as e:
                _debug_print(f"{self.name}: cannot set {prop} on {event.subject!r}: {e}")
                return False

            if new_key != event.key and new_key in self._events:
                _debug_print(f"{self.name}: edit of {prop} would duplicate {new_key}")
                return False

            del self._events[event.key]
            event.subject, event.start, event.end = new_key
            if prop == "start":
                event.series_id = None
            self._events[event.key] = event
            return True

        if prop == "description":
            event.description = new_value
        elif prop == "location":
            event.location = new_value
        elif prop == "status":
            event.status = (new_value if isinstance(new_value, EventStatus)
                            else EventStatus.from_text(new_value))
        return True

    def __repr__(self):
        return (f"CalendarInstance(name={self.name!r}, timezone={self.timezone_name!r}, "
                f"events={len(self._events)})")
