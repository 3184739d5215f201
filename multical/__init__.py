"""
multical - Calendar domain engine

This module provides the core functionality for calendar operations:
- Configuration parsing (config.py)
- Events and their status (event.py)
- Weekly series metadata and series ids (event_series.py)
- Per-calendar event store with series, queries and edits (calendar_instance.py)
- Calendar registry with current-calendar selection (calendar_manager.py)
- Cross-calendar, cross-timezone copying (copy_service.py)
- Timezone pivot helpers (timezone_utils.py)
"""

from .config import Config
from .event import Event, EventStatus, create_timed_event, create_all_day_event
from .event_series import EventSeries, Weekday, SeriesIdGenerator, parse_weekdays
from .calendar_instance import CalendarInstance
from .copy_service import EventCopyService
from .calendar_manager import CalendarManager
from .debug import set_debug

__all__ = [
    'Config',
    'Event',
    'EventStatus',
    'create_timed_event',
    'create_all_day_event',
    'EventSeries',
    'Weekday',
    'SeriesIdGenerator',
    'parse_weekdays',
    'CalendarInstance',
    'EventCopyService',
    'CalendarManager',
    'set_debug',
]
