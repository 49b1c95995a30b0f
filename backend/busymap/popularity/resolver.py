"""Resolve a venue's effective busyness for a given day and hour."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from busymap.popularity.domain import Venue
from busymap.popularity.errors import InvalidInputError
from busymap.popularity.table import Weekday, validate_hour

# Venues operate in local wall-clock time
DEFAULT_TIMEZONE = "America/Sao_Paulo"

# (lower bound, label, color), highest band first
BUSYNESS_BANDS: tuple[tuple[int, str, str], ...] = (
    (80, "Muito Cheio", "red"),
    (60, "Movimentado", "orange"),
    (40, "Moderado", "yellow"),
    (0, "Tranquilo", "green"),
)


def _band(value: float) -> tuple[int, str, str]:
    for band in BUSYNESS_BANDS:
        if value >= band[0]:
            return band
    return BUSYNESS_BANDS[-1]


def label(value: float) -> str:
    """Busyness label for a 0-100 value."""
    return _band(value)[1]


def color(value: float) -> str:
    """Marker/legend color for a 0-100 value, on the same bands as ``label``."""
    return _band(value)[2]


def get_zone(tz: ZoneInfo | str | None) -> ZoneInfo:
    if isinstance(tz, ZoneInfo):
        return tz
    try:
        return ZoneInfo(tz or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidInputError(f"Unknown timezone: {tz!r}") from None


def local_weekday(
    when: datetime | date | Weekday | str | int,
    tz: ZoneInfo | str | None = None,
) -> Weekday:
    """Weekday of ``when`` in the reference timezone.

    Aware datetimes are converted first; naive datetimes and dates are taken
    as local already. Weekday names and indexes pass straight through.
    """
    if isinstance(when, datetime):
        if when.tzinfo is not None:
            when = when.astimezone(get_zone(tz))
        return Weekday.from_date(when.date())
    if isinstance(when, date):
        return Weekday.from_date(when)
    return Weekday.parse(when)


@dataclass(frozen=True)
class Resolution:
    """Effective busyness of a venue at one hour."""

    value: int
    is_closed: bool

    @property
    def label(self) -> str:
        return label(self.value)

    @property
    def color(self) -> str:
        return color(self.value)


@dataclass(frozen=True)
class NextOpening:
    day: Weekday
    time: time
    is_today: bool

    @property
    def day_label(self) -> str:
        return self.day.label


def resolve(
    venue: Venue,
    when: datetime | date | Weekday | str | int,
    hour: int,
    tz: ZoneInfo | str | None = None,
) -> Resolution:
    """Effective busyness of ``venue`` on the weekday of ``when`` at ``hour``.

    A day flagged closed reports value 0 with ``is_closed`` set, whatever the
    table says. Open venues without a table report 0. Venues without any
    opening-hours data are never reported closed.
    """
    validate_hour(hour)
    day = local_weekday(when, tz)

    if venue.opening_hours is not None and venue.opening_hours.is_closed(day):
        return Resolution(value=0, is_closed=True)

    if venue.popularity is None:
        return Resolution(value=0, is_closed=False)

    return Resolution(value=venue.popularity.value_at(day, hour), is_closed=False)


def next_opening_time(
    venue: Venue,
    day: Weekday | str | int,
    hour: int,
) -> NextOpening | None:
    """Next time the venue opens after ``hour`` on ``day``.

    Looks for an opening later than ``hour``:00 today (18:30 counts at hour
    18), then up to 7 days ahead wrapping from
    Saturday to Sunday. Returns None for venues closed all week or without
    opening-hours data.
    """
    validate_hour(hour)
    day = Weekday.parse(day)
    hours = venue.opening_hours
    if hours is None:
        return None

    today = hours[day]
    if not today.closed and today.open is not None and today.open > time(hour):
        return NextOpening(day=day, time=today.open, is_today=True)

    for offset in range(1, 8):
        candidate = day.shift(offset)
        day_hours = hours[candidate]
        if not day_hours.closed and day_hours.open is not None:
            return NextOpening(day=candidate, time=day_hours.open, is_today=False)

    return None


def is_open_at(
    venue: Venue,
    when: datetime | date | Weekday | str | int,
    hour: int,
    tz: ZoneInfo | str | None = None,
) -> bool:
    """Whether ``venue`` is known to be open at ``hour`` on the weekday of ``when``.

    Unlike ``resolve`` this needs positive evidence: venues without opening
    hours, or without open and close times that day, are not reported open.
    """
    validate_hour(hour)
    if venue.opening_hours is None:
        return False
    day_hours = venue.opening_hours[local_weekday(when, tz)]
    return day_hours.has_window and day_hours.is_open_during(hour)
