"""
Cross-calendar event copying for multical.

Copies read from a source CalendarInstance and write into a target through
its add_event() entry point, so copies go through the same duplicate check
as any other new event. Times move between zones with the timezone pivot.
"""

import uuid
from datetime import datetime, date, timedelta

from .calendar_instance import CalendarInstance
from .event import Event, create_timed_event
from .timezone_utils import convert_between_timezones
from . import debug


def _debug_print(msg: str) -> None:
    debug.emit("COPY", msg)


class EventCopyService:
    """
    Stateless copier between two calendars.

    Bulk copies (by date or by range) are not atomic: events inserted before
    a failing one stay in the target calendar.
    """

    def __init__(self, copy_prefix: str = "copied-"):
        self.copy_prefix = copy_prefix

    def copy_event(
        self,
        subject: str,
        source_start: datetime,
        source: CalendarInstance,
        target: CalendarInstance,
        target_start: datetime,
    ) -> bool:
        """
        Copy one event so that it starts at target_start in the target calendar.

        Args:
            subject: Subject of the event to copy
            source_start: Start of the event in the source calendar
            source: Calendar holding the event
            target: Calendar receiving the copy
            target_start: Requested start, pivoted from the source zone into the target zone

        Returns:
            Whatever the target's add_event() returns; False if the event is not found.
        """
        source_event = source.find_event_by_subject_and_start(subject, source_start)
        if source_event is None:
            _debug_print(f"copy_event: {subject!r} at {source_start} not found in {source.name}")
            return False

        duration = source_event.duration
        new_start = convert_between_timezones(
            target_start, source.timezone, target.timezone, target_start.date()
        )
        new_end = new_start + duration

        copy = self._copy_of(source_event, new_start, new_end, target)
        return target.add_event(copy)

    def copy_events_on_date(
        self,
        source_date: date,
        source: CalendarInstance,
        target: CalendarInstance,
        target_date: date,
    ) -> bool:
        """
        Copy every event occurring on source_date onto target_date.

        Start and end are pivoted independently onto the target date. Returns
        True if there was nothing to copy or every copy was inserted.
        """
        events = source.get_events_on_date(source_date)
        if not events:
            return True

        all_successful = True
        for source_event in events:
            new_start = convert_between_timezones(
                source_event.start, source.timezone, target.timezone, target_date
            )
            new_end = convert_between_timezones(
                source_event.end, source.timezone, target.timezone, target_date
            )
            copy = self._copy_of(source_event, new_start, new_end, target)
            if not target.add_event(copy):
                all_successful = False

        if not all_successful:
            _debug_print(f"copy_events_on_date: some events from {source_date} "
                         f"were not copied to {target.name}")
        return all_successful

    def copy_events_in_range(
        self,
        start_date: date,
        end_date: date,
        source: CalendarInstance,
        target: CalendarInstance,
        target_start_date: date,
    ) -> bool:
        """
        Copy the events starting within [start_date, end_date] to a new start date.

        Each event is shifted by the day offset between start_date and
        target_start_date, then pivoted into the target zone on its shifted
        date. Series members get a new series id, shared by all copies of the
        same source series within this call.
        """
        range_start = datetime.combine(start_date, datetime.min.time())
        range_end = datetime.combine(end_date + timedelta(days=1), datetime.min.time())
        events = [e for e in source.get_events_in_range(range_start, range_end)
                  if start_date <= e.start.date() <= end_date]
        if not events:
            return True

        offset = timedelta(days=(target_start_date - start_date).days)
        series_mapping: dict[str, str] = {}
        all_successful = True

        for source_event in events:
            shifted_start = source_event.start + offset
            shifted_end = source_event.end + offset
            new_start = convert_between_timezones(
                shifted_start, source.timezone, target.timezone, shifted_start.date()
            )
            new_end = convert_between_timezones(
                shifted_end, source.timezone, target.timezone, shifted_end.date()
            )

            copy = self._copy_of(source_event, new_start, new_end, target)
            if source_event.series_id is not None:
                if source_event.series_id not in series_mapping:
                    series_mapping[source_event.series_id] = self._copied_series_id(
                        source_event.series_id
                    )
                copy.series_id = series_mapping[source_event.series_id]

            if not target.add_event(copy):
                all_successful = False

        if not all_successful:
            _debug_print(f"copy_events_in_range: some events from {start_date}..{end_date} "
                         f"were not copied to {target.name}")
        return all_successful

    # ==================== Helpers ====================

    def _copied_series_id(self, series_id: str) -> str:
        return f"{self.copy_prefix}{series_id}-{uuid.uuid4().hex[:8]}"

    def _copy_of(
        self,
        source_event: Event,
        new_start: datetime,
        new_end: datetime,
        target: CalendarInstance,
    ) -> Event:
        """
        Build a copy of an event at new times.

        All-day events stay all-day on the new start date, using the target
        calendar's all-day window.
        """
        if source_event.all_day:
            return target.make_all_day_event(
                source_event.subject, new_start.date(), source_event.description,
                source_event.location, source_event.status, source_event.series_id,
            )

        return create_timed_event(
            source_event.subject,
            new_start,
            new_end,
            source_event.description,
            source_event.location,
            source_event.status,
            series_id=source_event.series_id,
        )
