"""Immutable snapshots of venues, check-ins and events consumed by the engine."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from datetime import datetime

from busymap.popularity.errors import InvalidInputError
from busymap.popularity.hours import OpeningHours
from busymap.popularity.patterns import VenueCategory
from busymap.popularity.table import PopularityTable


def validate_coordinates(latitude: float, longitude: float) -> None:
    """Raise InvalidInputError unless latitude/longitude are finite and in range."""
    for value in (latitude, longitude):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise InvalidInputError(f"Invalid coordinates: ({latitude!r}, {longitude!r})")
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise InvalidInputError(f"Coordinates out of range: ({latitude}, {longitude})")


class DataSource(str, enum.Enum):
    """Provenance of a venue's popularity table."""

    MANUAL = "manual"
    SIMULATED = "simulated"
    USER_CHECKINS = "user_checkins"


class EventCategory(str, enum.Enum):
    """Event categories shown in the feed filter."""

    CLUBS = "clubs"
    BARS = "bars"
    SHOWS = "shows"
    FAIRS = "fairs"
    FOOD = "food"
    OTHER = "other"

    @classmethod
    def parse(cls, value: EventCategory | str | None) -> EventCategory:
        if isinstance(value, EventCategory):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.OTHER


class EventStatus(str, enum.Enum):
    """Moderation state; only approved events are visible outside admin views."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Venue:
    id: str
    latitude: float
    longitude: float
    category: VenueCategory = VenueCategory.OTHER
    opening_hours: OpeningHours | None = None
    popularity: PopularityTable | None = None
    data_source: DataSource = DataSource.SIMULATED

    def __post_init__(self) -> None:
        validate_coordinates(self.latitude, self.longitude)


@dataclass(frozen=True)
class Checkin:
    latitude: float
    longitude: float
    created_at: datetime
    venue_id: str | None = None
    is_anonymous: bool = False


@dataclass(frozen=True)
class ScheduledEvent:
    id: str
    category: EventCategory
    start_at: datetime | None
    venue_id: str | None
    end_at: datetime | None = None
    status: EventStatus = EventStatus.PENDING
    is_active: bool = True
    attendee_ids: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.start_at is not None and self.end_at is not None and self.end_at <= self.start_at:
            raise InvalidInputError(f"Event {self.id}: end time must be after start time")

    @property
    def confirmed_count(self) -> int:
        return len(self.attendee_ids)


@dataclass(frozen=True)
class PlaceSignal:
    """Popularity hints about a place beyond its hourly table."""

    latitude: float
    longitude: float
    rating: float | None = None
    user_ratings_total: int | None = None
    open_now: bool = False
    # Level of an active boosted event at the place; 0 when none
    boost_level: int = 0
