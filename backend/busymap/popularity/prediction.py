"""Forward-looking intensity of upcoming events for the prediction heatmap."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from zoneinfo import ZoneInfo

from busymap.popularity.domain import EventCategory, EventStatus, ScheduledEvent, Venue
from busymap.popularity.errors import InvalidInputError
from busymap.popularity.heatmap import HeatmapPoint
from busymap.popularity.resolver import get_zone, resolve
from busymap.popularity.table import MAX_POPULARITY

logger = logging.getLogger(__name__)

CATEGORY_WEIGHTS: dict[EventCategory, float] = {
    EventCategory.CLUBS: 2.0,
    EventCategory.BARS: 1.5,
    EventCategory.SHOWS: 1.0,
    EventCategory.FAIRS: 1.0,
    EventCategory.FOOD: 0.5,
    EventCategory.OTHER: 0.5,
}

ATTENDEE_FACTOR = 1.0
VENUE_POPULARITY_FACTOR = 0.8
INTENSITY_SCALE = 10.0


def score(
    event: ScheduledEvent,
    confirmed_attendee_count: int,
    venue_popularity_value: float,
) -> float:
    """Intensity in [0, 1] of an upcoming event.

    raw = attendees * 1.0 + (venue popularity / 100) * 0.8 + category weight,
    intensity = min(raw / 10, 1.0).
    """
    if event.venue_id is None:
        raise InvalidInputError(f"Event {event.id} has no venue")
    if event.start_at is None:
        raise InvalidInputError(f"Event {event.id} has no start time")
    if isinstance(confirmed_attendee_count, bool) or not isinstance(confirmed_attendee_count, int):
        raise InvalidInputError(f"Attendee count must be an integer, got {confirmed_attendee_count!r}")
    if confirmed_attendee_count < 0:
        raise InvalidInputError(f"Attendee count must not be negative, got {confirmed_attendee_count}")
    if not 0 <= venue_popularity_value <= MAX_POPULARITY:
        raise InvalidInputError(f"Venue popularity out of range (0-100): {venue_popularity_value}")

    raw = (
        confirmed_attendee_count * ATTENDEE_FACTOR
        + (venue_popularity_value / MAX_POPULARITY) * VENUE_POPULARITY_FACTOR
        + CATEGORY_WEIGHTS[EventCategory.parse(event.category)]
    )
    return min(raw / INTENSITY_SCALE, 1.0)


def is_eligible(event: ScheduledEvent, now: datetime) -> bool:
    """Approved, active and starting strictly after ``now``.

    ``now`` and the event start must both be timezone-aware or both naive.
    """
    if event.start_at is not None and (event.start_at.tzinfo is None) != (now.tzinfo is None):
        raise InvalidInputError(
            f"Event {event.id}: cannot compare naive and timezone-aware datetimes"
        )
    return (
        event.status == EventStatus.APPROVED
        and event.is_active
        and event.start_at is not None
        and event.start_at > now
    )


def predict(
    events: Iterable[ScheduledEvent],
    venues: Mapping[str, Venue] | Iterable[Venue],
    now: datetime,
    attendee_counts: Mapping[str, int] | None = None,
    tz: ZoneInfo | str | None = None,
) -> list[HeatmapPoint]:
    """One weighted point per eligible event, at its venue.

    The venue's ambient popularity is resolved at the event's local start
    day and hour. ``attendee_counts`` overrides the attendee set carried on
    the event when the caller counted confirmations separately.
    """
    if not isinstance(venues, Mapping):
        venues = {venue.id: venue for venue in venues}
    zone = get_zone(tz)

    points = []
    for event in events:
        if not is_eligible(event, now):
            continue
        venue = venues.get(event.venue_id) if event.venue_id else None
        if venue is None:
            logger.warning(f"Skipping event {event.id}: venue {event.venue_id} not found")
            continue

        start = event.start_at
        if start.tzinfo is not None:
            start = start.astimezone(zone)
        ambient = resolve(venue, start.date(), start.hour, zone).value

        count = event.confirmed_count
        if attendee_counts is not None:
            count = attendee_counts.get(event.id, count)

        points.append(HeatmapPoint(venue.latitude, venue.longitude, score(event, count, ambient)))
    return points
