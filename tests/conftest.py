"""Shared test fixtures for multical tests."""

import pytest

from multical import CalendarInstance, CalendarManager, SeriesIdGenerator


@pytest.fixture
def calendar() -> CalendarInstance:
    """An empty calendar in New York time."""
    return CalendarInstance("work", "America/New_York", id_generator=SeriesIdGenerator())


@pytest.fixture
def manager() -> CalendarManager:
    """A manager with 'work' (New York) in use and 'personal' (Los Angeles)."""
    mgr = CalendarManager()
    assert mgr.create_calendar("work", "America/New_York")
    assert mgr.create_calendar("personal", "America/Los_Angeles")
    assert mgr.use_calendar("work")
    return mgr
