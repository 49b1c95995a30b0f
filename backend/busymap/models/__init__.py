"""SQLAlchemy ORM models."""

from busymap.models.checkin import Checkin
from busymap.models.event import Event, EventAttendee
from busymap.models.place import Place

__all__ = [
    "Checkin",
    "Event",
    "EventAttendee",
    "Place",
]
