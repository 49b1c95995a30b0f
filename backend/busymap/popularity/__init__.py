"""Venue popularity engine: default patterns, resolution and heatmap aggregation."""

from busymap.popularity.domain import (
    Checkin,
    DataSource,
    EventCategory,
    EventStatus,
    PlaceSignal,
    ScheduledEvent,
    Venue,
)
from busymap.popularity.errors import InvalidInputError, PopularityError, UpstreamUnavailableError
from busymap.popularity.heatmap import HeatmapPoint, aggregate
from busymap.popularity.patterns import VenueCategory, fit_to_opening_hours, generate_default_table
from busymap.popularity.prediction import is_eligible, predict, score
from busymap.popularity.resolver import (
    NextOpening,
    Resolution,
    color,
    is_open_at,
    label,
    next_opening_time,
    resolve,
)
from busymap.popularity.table import PopularityTable, Weekday

__all__ = [
    "Checkin",
    "DataSource",
    "EventCategory",
    "EventStatus",
    "HeatmapPoint",
    "InvalidInputError",
    "NextOpening",
    "PlaceSignal",
    "PopularityError",
    "PopularityTable",
    "Resolution",
    "ScheduledEvent",
    "UpstreamUnavailableError",
    "Venue",
    "VenueCategory",
    "Weekday",
    "aggregate",
    "color",
    "fit_to_opening_hours",
    "generate_default_table",
    "is_eligible",
    "is_open_at",
    "label",
    "next_opening_time",
    "predict",
    "resolve",
    "score",
]
