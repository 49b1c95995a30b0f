"""Aggregate venue busyness and live signals into weighted heatmap points."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from busymap.popularity.domain import Checkin, PlaceSignal, Venue, validate_coordinates
from busymap.popularity.errors import InvalidInputError
from busymap.popularity.resolver import resolve
from busymap.popularity.table import MAX_POPULARITY, Weekday

# Weight of a single live check-in
CHECKIN_WEIGHT = 0.5

# Copies per venue at full busyness when the map layer only understands density
REFERENCE_REPLICATION = 10

# Place signal: base + rating + review volume + open now + boost, capped
PLACE_SIGNAL_BASE = 0.5
PLACE_SIGNAL_RATING = 0.2
PLACE_SIGNAL_VOLUME = 0.3
PLACE_SIGNAL_OPEN_NOW = 0.3
PLACE_SIGNAL_BOOST = 0.2
PLACE_SIGNAL_CAP = 1.5
PLACE_SIGNAL_VOLUME_SATURATION = 1000


@dataclass(frozen=True)
class HeatmapPoint:
    latitude: float
    longitude: float
    weight: float

    def __post_init__(self) -> None:
        validate_coordinates(self.latitude, self.longitude)
        object.__setattr__(self, "weight", min(max(float(self.weight), 0.0), 1.0))


def venue_points(
    venue: Venue,
    when: datetime | date | Weekday | str | int,
    hour: int,
    *,
    replication: int | None = None,
    tz: ZoneInfo | str | None = None,
) -> list[HeatmapPoint]:
    """Points contributed by one venue; empty when closed or quiet."""
    resolution = resolve(venue, when, hour, tz)
    if resolution.is_closed or resolution.value <= 0:
        return []

    weight = resolution.value / MAX_POPULARITY
    point = HeatmapPoint(venue.latitude, venue.longitude, weight)
    if replication is None:
        return [point]
    return [point] * math.ceil(weight * replication)


def place_signal_weight(signal: PlaceSignal) -> float:
    """Normalized [0, 1] weight of an external place-popularity signal."""
    weight = PLACE_SIGNAL_BASE
    if signal.rating:
        weight += (signal.rating / 5) * PLACE_SIGNAL_RATING
    if signal.user_ratings_total:
        weight += min(signal.user_ratings_total / PLACE_SIGNAL_VOLUME_SATURATION, 1) * PLACE_SIGNAL_VOLUME
    if signal.open_now:
        weight += PLACE_SIGNAL_OPEN_NOW
    if signal.boost_level > 0:
        weight += PLACE_SIGNAL_BOOST * signal.boost_level
    return min(weight, PLACE_SIGNAL_CAP) / PLACE_SIGNAL_CAP


def aggregate(
    venues: Iterable[Venue],
    selected_date: datetime | date | Weekday | str | int,
    selected_hour: int,
    live_checkins: Iterable[Checkin] | None = None,
    place_signals: Iterable[PlaceSignal] | None = None,
    *,
    replication: int | None = None,
    checkin_weight: float = CHECKIN_WEIGHT,
    tz: ZoneInfo | str | None = None,
) -> list[HeatmapPoint]:
    """Build heatmap points for the selected day and hour.

    Open venues weigh ``value / 100``; closed venues add nothing. By default
    each venue is one weighted point. Pass ``replication`` (reference value
    10) to repeat the coordinate ``ceil(weight * replication)`` times for map
    layers that render point density instead of weights.

    Live check-ins must already be filtered to the live window by the caller.
    """
    if replication is not None and replication < 1:
        raise InvalidInputError(f"Replication must be a positive integer, got {replication}")

    points: list[HeatmapPoint] = []
    for venue in venues:
        points.extend(
            venue_points(venue, selected_date, selected_hour, replication=replication, tz=tz)
        )

    for checkin in live_checkins or ():
        points.append(HeatmapPoint(checkin.latitude, checkin.longitude, checkin_weight))

    for signal in place_signals or ():
        points.append(HeatmapPoint(signal.latitude, signal.longitude, place_signal_weight(signal)))

    return points
