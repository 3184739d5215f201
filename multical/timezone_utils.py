"""
Timezone utilities for multical.

Event times are stored naive and interpreted in the owning calendar's
timezone. Moving a time between calendars goes through the absolute
instant ("timezone pivot") and is then re-localized onto a target date.
"""

from datetime import datetime, date
from typing import Union

import pytz


TimezoneLike = Union[str, pytz.BaseTzInfo]


def resolve_timezone(timezone: TimezoneLike) -> pytz.BaseTzInfo:
    """
    Resolve an IANA zone name (or an existing pytz zone) to a pytz zone.

    Raises:
        pytz.UnknownTimeZoneError: if the name does not resolve.
    """
    if isinstance(timezone, pytz.BaseTzInfo):
        return timezone
    if not isinstance(timezone, str) or not timezone.strip():
        raise pytz.UnknownTimeZoneError(timezone)
    return pytz.timezone(timezone.strip())


def is_valid_timezone(timezone: TimezoneLike) -> bool:
    try:
        resolve_timezone(timezone)
    except pytz.UnknownTimeZoneError:
        return False
    return True


def zone_name(tz: pytz.BaseTzInfo) -> str:
    """Get the IANA name of a pytz zone."""
    return tz.zone


def same_zone(a: pytz.BaseTzInfo, b: pytz.BaseTzInfo) -> bool:
    return zone_name(a) == zone_name(b)


def to_zoned(dt: datetime, tz: pytz.BaseTzInfo) -> datetime:
    """
    Attach a zone to a naive local datetime.

    pytz zones must go through localize() so the correct DST offset is
    picked; replace(tzinfo=...) would use the zone's LMT offset.

    A wall time repeated by a fall-back transition takes the earlier
    (daylight) offset. A wall time skipped by a spring-forward transition
    is read with the pre-transition offset, which moves it forward by the
    length of the gap.
    """
    if dt.tzinfo is not None:
        return dt.astimezone(tz)
    try:
        return tz.localize(dt, is_dst=None)
    except pytz.AmbiguousTimeError:
        return tz.localize(dt, is_dst=True)
    except pytz.NonExistentTimeError:
        return tz.localize(dt, is_dst=False)


def convert_between_timezones(
    original: datetime,
    source_tz: pytz.BaseTzInfo,
    target_tz: pytz.BaseTzInfo,
    target_date: date,
) -> datetime:
    """
    Convert a naive local time from one zone to another and place it on a date.

    Args:
        original: Naive datetime, local to source_tz.
        source_tz: Zone the original time belongs to.
        target_tz: Zone to express the time in.
        target_date: Calendar date the result lands on.

    Returns:
        A naive datetime: target_date combined with the target-zone
        time-of-day of the same instant. When both zones are the same the
        original time-of-day is kept as is.
    """
    if same_zone(source_tz, target_tz):
        return datetime.combine(target_date, original.time())

    source_zoned = to_zoned(original, source_tz)
    target_zoned = source_zoned.astimezone(target_tz)
    return datetime.combine(target_date, target_zoned.time())
