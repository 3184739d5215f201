"""Small helpers shared by the test modules."""

from datetime import datetime


def dt(text: str) -> datetime:
    """Shorthand for boundary datetimes ('YYYY-MM-DDTHH:MM') in tests."""
    return datetime.strptime(text, "%Y-%m-%dT%H:%M")
