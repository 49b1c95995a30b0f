"""Opening-hours table: per weekday an open/close time or a closed-all-day flag."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import time

from busymap.popularity.errors import InvalidInputError
from busymap.popularity.table import Weekday


def parse_time(value: time | str | None) -> time | None:
    """Parse ``HH:MM`` (or ``HHMM`` as the Places API reports it) into a time."""
    if value is None or isinstance(value, time):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"Invalid time: {value!r}")
    text = value.strip()
    if ":" not in text and len(text) == 4 and text.isdigit():
        text = f"{text[:2]}:{text[2:]}"
    try:
        return time.fromisoformat(text)
    except ValueError:
        raise InvalidInputError(f"Invalid time: {value!r}") from None


@dataclass(frozen=True)
class DayHours:
    """Opening window for a single weekday."""

    open: time | None = None
    close: time | None = None
    closed: bool = False

    @classmethod
    def from_dict(cls, data: Mapping) -> DayHours:
        return cls(
            open=parse_time(data.get("open")),
            close=parse_time(data.get("close")),
            closed=bool(data.get("closed", False)),
        )

    @property
    def has_window(self) -> bool:
        return not self.closed and self.open is not None and self.close is not None

    def is_open_during(self, hour: int) -> bool:
        """Whether the venue is open during ``hour``, at whole-hour resolution.

        A close hour at or before the open hour is a window crossing midnight
        (18:00-02:00 is open from 18 to 23 and from 0 to 1). Days without
        known times count as open.
        """
        if self.closed:
            return False
        if self.open is None or self.close is None:
            return True
        if self.close.hour > self.open.hour:
            return self.open.hour <= hour < self.close.hour
        return not self.close.hour <= hour < self.open.hour

    def to_dict(self) -> dict:
        return {
            "open": self.open.strftime("%H:%M") if self.open else None,
            "close": self.close.strftime("%H:%M") if self.close else None,
            "closed": self.closed,
        }


@dataclass(frozen=True)
class OpeningHours:
    """Weekly opening hours. Days without data default to open with unknown times."""

    monday: DayHours = DayHours()
    tuesday: DayHours = DayHours()
    wednesday: DayHours = DayHours()
    thursday: DayHours = DayHours()
    friday: DayHours = DayHours()
    saturday: DayHours = DayHours()
    sunday: DayHours = DayHours()

    def __getitem__(self, day: Weekday | str | int) -> DayHours:
        return getattr(self, Weekday.parse(day).value)

    def is_closed(self, day: Weekday | str | int) -> bool:
        return self[day].closed

    @property
    def closed_all_week(self) -> bool:
        return all(self[day].closed for day in Weekday)

    def to_dict(self) -> dict[str, dict]:
        return {day.value: self[day].to_dict() for day in Weekday}

    @classmethod
    def from_dict(cls, data: Mapping) -> OpeningHours:
        if not isinstance(data, Mapping):
            raise InvalidInputError("Opening hours must be an object keyed by weekday")
        days = {}
        for key, value in data.items():
            day = Weekday.parse(key)
            if not isinstance(value, Mapping):
                raise InvalidInputError(f"{day.value}: opening hours must be an object")
            days[day.value] = DayHours.from_dict(value)
        return cls(**days)
