"""Weekly popularity table: 7 weekdays x 24 hourly busyness values."""

from __future__ import annotations

import enum
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import date

from busymap.popularity.errors import InvalidInputError

HOURS_PER_DAY = 24
MIN_POPULARITY = 0
MAX_POPULARITY = 100

# Reported when a day has no busy hour at all
DEFAULT_PEAK_HOUR = 20


class Weekday(str, enum.Enum):
    """Day of the week, ordered Sunday-first (index 0 = Sunday)."""

    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @property
    def index(self) -> int:
        return _WEEKDAY_ORDER.index(self)

    @property
    def label(self) -> str:
        """Display label used by list views and legends."""
        return _WEEKDAY_LABELS[self]

    def shift(self, days: int) -> Weekday:
        """Return the weekday ``days`` after this one, wrapping Saturday to Sunday."""
        return _WEEKDAY_ORDER[(self.index + days) % 7]

    @classmethod
    def from_date(cls, value: date) -> Weekday:
        # isoweekday: Monday=1 .. Sunday=7
        return _WEEKDAY_ORDER[value.isoweekday() % 7]

    @classmethod
    def parse(cls, value: Weekday | str | int) -> Weekday:
        """Parse a weekday from an enum member, a day name or a Sunday-first index."""
        if isinstance(value, Weekday):
            return value
        if isinstance(value, bool):
            raise InvalidInputError(f"Invalid weekday: {value!r}")
        if isinstance(value, int):
            if 0 <= value <= 6:
                return _WEEKDAY_ORDER[value]
            raise InvalidInputError(f"Weekday index out of range: {value}")
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                raise InvalidInputError(f"Invalid weekday: {value!r}") from None
        raise InvalidInputError(f"Invalid weekday: {value!r}")


_WEEKDAY_ORDER: tuple[Weekday, ...] = tuple(Weekday)

_WEEKDAY_LABELS = {
    Weekday.SUNDAY: "Domingo",
    Weekday.MONDAY: "Segunda",
    Weekday.TUESDAY: "Terça",
    Weekday.WEDNESDAY: "Quarta",
    Weekday.THURSDAY: "Quinta",
    Weekday.FRIDAY: "Sexta",
    Weekday.SATURDAY: "Sábado",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def clamp_popularity(value: float) -> int:
    """Round and clamp a busyness value into [0, 100]."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"Popularity value must be a number, got {value!r}")
    if math.isnan(value):
        raise InvalidInputError("Popularity value must not be NaN")
    if math.isinf(value):
        return MAX_POPULARITY if value > 0 else MIN_POPULARITY
    return min(max(round_half_up(value), MIN_POPULARITY), MAX_POPULARITY)


def validate_hour(hour: int) -> int:
    """Return ``hour`` if it is an integer in [0, 23], else raise InvalidInputError."""
    if isinstance(hour, bool) or not isinstance(hour, int):
        raise InvalidInputError(f"Hour must be an integer, got {hour!r}")
    if not 0 <= hour < HOURS_PER_DAY:
        raise InvalidInputError(f"Hour out of range (0-23): {hour}")
    return hour


def _normalize_day(day: str, values: Iterable[float]) -> tuple[int, ...]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise InvalidInputError(f"{day}: expected a sequence of {HOURS_PER_DAY} values")
    normalized = tuple(clamp_popularity(v) for v in values)
    if len(normalized) != HOURS_PER_DAY:
        raise InvalidInputError(
            f"{day}: expected {HOURS_PER_DAY} hourly values, got {len(normalized)}"
        )
    return normalized


@dataclass(frozen=True)
class PopularityTable:
    """Hourly busyness (0-100) for each weekday, index 0 = 00:00-00:59 local time.

    Values are clamped into range on construction, so every instance satisfies
    the 7 x 24 shape.
    """

    monday: tuple[int, ...]
    tuesday: tuple[int, ...]
    wednesday: tuple[int, ...]
    thursday: tuple[int, ...]
    friday: tuple[int, ...]
    saturday: tuple[int, ...]
    sunday: tuple[int, ...]

    def __post_init__(self) -> None:
        for day in Weekday:
            object.__setattr__(self, day.value, _normalize_day(day.value, getattr(self, day.value)))

    def __getitem__(self, day: Weekday | str | int) -> tuple[int, ...]:
        return getattr(self, Weekday.parse(day).value)

    def value_at(self, day: Weekday | str | int, hour: int) -> int:
        return self[day][validate_hour(hour)]

    def with_day(self, day: Weekday | str | int, values: Iterable[float]) -> PopularityTable:
        """Return a copy with one day replaced (values are clamped)."""
        return replace(self, **{Weekday.parse(day).value: tuple(values)})

    def peak_hour(self, day: Weekday | str | int) -> int:
        """Hour with the highest busyness; the first one wins on ties."""
        peak_hour = DEFAULT_PEAK_HOUR
        peak_value = 0
        for hour, value in enumerate(self[day]):
            if value > peak_value:
                peak_value = value
                peak_hour = hour
        return peak_hour

    def average(self, day: Weekday | str | int) -> int:
        values = self[day]
        return round_half_up(sum(values) / len(values))

    def to_dict(self) -> dict[str, list[int]]:
        """Persisted JSON shape: ``monday`` .. ``sunday`` -> 24 integers."""
        return {field: list(getattr(self, field)) for field in _PERSISTED_KEYS}

    @classmethod
    def zeros(cls) -> PopularityTable:
        return cls(**{day.value: (0,) * HOURS_PER_DAY for day in Weekday})

    @classmethod
    def from_dict(cls, data: Mapping, *, fill_missing: bool = False) -> PopularityTable:
        """Build a table from its persisted shape.

        With ``fill_missing`` absent days and short arrays are padded with
        zeros and long arrays truncated, for documents written before the
        shape was enforced.
        """
        if not isinstance(data, Mapping):
            raise InvalidInputError("Popularity table must be an object keyed by weekday")

        days: dict[str, list] = {}
        for key in _PERSISTED_KEYS:
            raw = data.get(key)
            if raw is None:
                if not fill_missing:
                    raise InvalidInputError(f"Popularity table is missing '{key}'")
                raw = []
            if not isinstance(raw, (list, tuple)):
                raise InvalidInputError(f"{key}: expected a list of {HOURS_PER_DAY} values")
            if fill_missing:
                raw = [0 if v is None else v for v in list(raw)[:HOURS_PER_DAY]]
                raw += [0] * (HOURS_PER_DAY - len(raw))
            days[key] = raw
        return cls(**days)


_PERSISTED_KEYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
