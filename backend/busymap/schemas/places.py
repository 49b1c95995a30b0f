"""Schemas for places and their popular times."""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from busymap.popularity.domain import DataSource
from busymap.popularity.table import HOURS_PER_DAY, PopularityTable, clamp_popularity
from busymap.schemas.common import CamelModel

HourlyValues = list[int]


class PopularTimesSchema(CamelModel):
    """Weekly popular times: 24 hourly values (0-100) per weekday.

    Out-of-range values are clamped, not rejected.
    """

    monday: HourlyValues = Field(..., min_length=HOURS_PER_DAY, max_length=HOURS_PER_DAY)
    tuesday: HourlyValues = Field(..., min_length=HOURS_PER_DAY, max_length=HOURS_PER_DAY)
    wednesday: HourlyValues = Field(..., min_length=HOURS_PER_DAY, max_length=HOURS_PER_DAY)
    thursday: HourlyValues = Field(..., min_length=HOURS_PER_DAY, max_length=HOURS_PER_DAY)
    friday: HourlyValues = Field(..., min_length=HOURS_PER_DAY, max_length=HOURS_PER_DAY)
    saturday: HourlyValues = Field(..., min_length=HOURS_PER_DAY, max_length=HOURS_PER_DAY)
    sunday: HourlyValues = Field(..., min_length=HOURS_PER_DAY, max_length=HOURS_PER_DAY)

    @field_validator(
        "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
        mode="before",
    )
    @classmethod
    def clamp_values(cls, v: list) -> list[int]:
        """Clamp each hourly value into [0, 100]."""
        if not isinstance(v, (list, tuple)):
            raise ValueError("Expected a list of hourly values")
        return [clamp_popularity(value) for value in v]

    def to_table(self) -> PopularityTable:
        return PopularityTable(**self.model_dump())

    @classmethod
    def from_table(cls, table: PopularityTable) -> "PopularTimesSchema":
        return cls(**table.to_dict())


class PopularTimesUpdate(CamelModel):
    """Manual edit of a place's popular times."""

    popular_times: PopularTimesSchema
    data_source: Literal["manual"] = "manual"


class DayHoursSchema(CamelModel):
    """Opening window for one weekday."""

    open: str | None = None
    close: str | None = None
    closed: bool = False


class PlaceResponse(CamelModel):
    """Response schema for a place."""

    id: str
    google_place_id: str | None = Field(default=None, serialization_alias="placeId")
    name: str
    address: str | None = None
    latitude: float
    longitude: float
    category: str
    rating: float | None = None
    user_ratings_total: int | None = None
    popular_times: dict[str, list[int]] | None = None
    opening_hours: dict[str, DayHoursSchema] | None = None
    data_source: DataSource | None = None
    popular_times_updated_at: datetime | None = None


class NextOpeningResponse(CamelModel):
    """When a closed place opens next."""

    day: str
    day_label: str
    time: str
    is_today: bool


class PopularityResponse(CamelModel):
    """Resolved busyness of a place at one day and hour."""

    place_id: str
    day: str
    hour: int
    value: int
    is_closed: bool
    label: str
    color: str
    peak_hour: int | None = None
    average: int | None = None
    data_source: DataSource | None = None
    next_opening: NextOpeningResponse | None = None
