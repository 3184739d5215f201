"""
Calendar manager for multical.

Registry of CalendarInstance objects by name with a single "current
calendar" selection. Single-calendar operations are delegated to the current
calendar; copies between calendars go through an EventCopyService.

Every operation reports failure through its return value (False, an empty
list/set or None); nothing here raises for business-rule violations.
"""

from datetime import datetime, date
from typing import Iterable, Optional

import pytz

from .calendar_instance import CalendarInstance
from .config import Config
from .copy_service import EventCopyService
from .event import Event, EventStatus
from .event_series import SeriesIdGenerator
from .timezone_utils import TimezoneLike, resolve_timezone
from . import debug


def _debug_print(msg: str) -> None:
    debug.emit("MANAGER", msg)


class CalendarManager:
    """
    Registry of named calendars with a current-calendar selection.

    All calendars share one SeriesIdGenerator, so series ids are unique
    across the whole manager.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        copy_service: Optional[EventCopyService] = None,
        id_generator: Optional[SeriesIdGenerator] = None,
    ):
        self.config = config or Config()
        if self.config.general.debug:
            debug.set_debug(True)

        self._calendars: dict[str, CalendarInstance] = {}
        self._current: Optional[CalendarInstance] = None
        self._copy_service = copy_service or EventCopyService(self.config.series.copy_prefix)
        self._id_generator = id_generator or SeriesIdGenerator(self.config.series.id_prefix)

    # ==================== Calendar Management ====================

    def create_calendar(self, name: str, timezone: Optional[TimezoneLike] = None) -> bool:
        """
        Create a calendar. Fails if the name is taken or the zone is unknown.

        A missing timezone falls back to the configured default.
        """
        if not name:
            _debug_print("create_calendar: empty name")
            return False
        if name in self._calendars:
            _debug_print(f"create_calendar: name {name!r} already taken")
            return False

        if timezone is None:
            timezone = self.config.general.default_timezone

        try:
            calendar = CalendarInstance(
                name,
                timezone,
                id_generator=self._id_generator,
                all_day_start=self.config.all_day.start,
                all_day_end=self.config.all_day.end,
            )
        except pytz.UnknownTimeZoneError:
            _debug_print(f"create_calendar: unknown timezone {timezone!r}")
            return False

        self._calendars[name] = calendar
        _debug_print(f"Created calendar {name!r} ({calendar.timezone_name})")
        return True

    def edit_calendar(self, name: str, property_name: str, value: str) -> bool:
        """
        Change a calendar's name or timezone.

        Values are validated before anything is changed: renaming onto an
        existing name and unknown zones both fail without side effects.
        """
        calendar = self._calendars.get(name)
        if calendar is None:
            _debug_print(f"edit_calendar: unknown calendar {name!r}")
            return False

        prop = (property_name or "").strip().lower()
        if prop == "name":
            return self._rename_calendar(name, value)
        if prop == "timezone":
            try:
                calendar.timezone = resolve_timezone(value)
            except pytz.UnknownTimeZoneError:
                _debug_print(f"edit_calendar: unknown timezone {value!r}")
                return False
            return True

        _debug_print(f"edit_calendar: unknown property {property_name!r}")
        return False

    def _rename_calendar(self, old_name: str, new_name: str) -> bool:
        if not new_name or new_name in self._calendars:
            _debug_print(f"edit_calendar: cannot rename {old_name!r} to {new_name!r}")
            return False

        calendar = self._calendars.pop(old_name)
        calendar.name = new_name
        self._calendars[new_name] = calendar
        return True

    def use_calendar(self, name: str) -> bool:
        """Select the current calendar; an unknown name keeps the previous selection."""
        calendar = self._calendars.get(name)
        if calendar is None:
            _debug_print(f"use_calendar: unknown calendar {name!r}")
            return False
        self._current = calendar
        return True

    def get_current_calendar(self) -> Optional[CalendarInstance]:
        return self._current

    def get_current_calendar_name(self) -> Optional[str]:
        return self._current.name if self._current is not None else None

    def get_calendar(self, name: str) -> Optional[CalendarInstance]:
        return self._calendars.get(name)

    def get_calendar_names(self) -> set[str]:
        return set(self._calendars)

    def calendar_exists(self, name: str) -> bool:
        return name in self._calendars

    @property
    def copy_service(self) -> EventCopyService:
        return self._copy_service

    def set_copy_service(self, copy_service: EventCopyService):
        self._copy_service = copy_service

    @property
    def id_generator(self) -> SeriesIdGenerator:
        return self._id_generator

    # ==================== Copying ====================

    def _copy_target(self, target_name: str) -> Optional[CalendarInstance]:
        """Resolve the target of a copy; None if no current calendar or unknown target."""
        if self._current is None:
            _debug_print("copy: no calendar in use")
            return None
        target = self._calendars.get(target_name)
        if target is None:
            _debug_print(f"copy: unknown target calendar {target_name!r}")
        return target

    def copy_event(
        self,
        subject: str,
        source_start: datetime,
        target_calendar_name: str,
        target_start: datetime,
    ) -> bool:
        target = self._copy_target(target_calendar_name)
        if target is None:
            return False
        return self._copy_service.copy_event(
            subject, source_start, self._current, target, target_start
        )

    def copy_events_on_date(
        self,
        source_date: date,
        target_calendar_name: str,
        target_date: date,
    ) -> bool:
        target = self._copy_target(target_calendar_name)
        if target is None:
            return False
        return self._copy_service.copy_events_on_date(
            source_date, self._current, target, target_date
        )

    def copy_events_in_range(
        self,
        start_date: date,
        end_date: date,
        target_calendar_name: str,
        target_start_date: date,
    ) -> bool:
        target = self._copy_target(target_calendar_name)
        if target is None:
            return False
        return self._copy_service.copy_events_in_range(
            start_date, end_date, self._current, target, target_start_date
        )

    # ==================== Event Creation ====================

    def create_event(
        self,
        subject: str,
        start: datetime,
        end: datetime,
        description: Optional[str] = None,
        location: Optional[str] = None,
        status: Optional[EventStatus] = EventStatus.PUBLIC,
    ) -> bool:
        if self._current is None:
            return False
        return self._current.create_event(subject, start, end, description, location, status)

    def create_all_day_event(
        self,
        subject: str,
        day: date,
        description: Optional[str] = None,
        location: Optional[str] = None,
        status: Optional[EventStatus] = EventStatus.PUBLIC,
    ) -> bool:
        if self._current is None:
            return False
        return self._current.create_all_day_event(subject, day, description, location, status)

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
        if self._current is None:
            return False
        return self._current.create_event_series(
            subject, start, end, weekdays, occurrences, description, location, status
        )

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
        if self._current is None:
            return False
        return self._current.create_event_series_until(
            subject, start, end, weekdays, end_date, description, location, status
        )

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
        if self._current is None:
            return False
        return self._current.create_all_day_event_series(
            subject, start_date, weekdays, occurrences, description, location, status
        )

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
        if self._current is None:
            return False
        return self._current.create_all_day_event_series_until(
            subject, start_date, weekdays, end_date, description, location, status
        )

    # ==================== Queries ====================

    def get_events_on_date(self, day: date) -> list[Event]:
        if self._current is None:
            return []
        return self._current.get_events_on_date(day)

    def get_events_in_range(self, start: datetime, end: datetime) -> list[Event]:
        if self._current is None:
            return []
        return self._current.get_events_in_range(start, end)

    def is_busy(self, instant: datetime) -> bool:
        if self._current is None:
            return False
        return self._current.is_busy(instant)

    def find_event(self, subject: str, start: datetime, end: datetime) -> Optional[Event]:
        if self._current is None:
            return None
        return self._current.find_event(subject, start, end)

    def find_event_by_subject_and_start(self, subject: str, start: datetime) -> Optional[Event]:
        if self._current is None:
            return None
        return self._current.find_event_by_subject_and_start(subject, start)

    def get_all_events(self) -> set[Event]:
        if self._current is None:
            return set()
        return self._current.get_all_events()

    # ==================== Editing ====================

    def edit_event(
        self,
        property_name: str,
        subject: str,
        start: datetime,
        end: datetime,
        new_value,
    ) -> bool:
        if self._current is None:
            return False
        return self._current.edit_event(property_name, subject, start, end, new_value)

    def edit_events_from_date(
        self,
        property_name: str,
        subject: str,
        start: datetime,
        new_value,
    ) -> bool:
        if self._current is None:
            return False
        return self._current.edit_events_from_date(property_name, subject, start, new_value)

    def edit_entire_series(
        self,
        property_name: str,
        subject: str,
        start: datetime,
        new_value,
    ) -> bool:
        if self._current is None:
            return False
        return self._current.edit_entire_series(property_name, subject, start, new_value)

    def __repr__(self):
        return (f"CalendarManager(calendars={len(self._calendars)}, "
                f"current={self.get_current_calendar_name()!r})")
