"""Default popularity patterns by venue category.

Used for venues that have no manual or scraped data yet.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from busymap.popularity.hours import OpeningHours
from busymap.popularity.table import (
    HOURS_PER_DAY,
    MAX_POPULARITY,
    PopularityTable,
    Weekday,
    round_half_up,
)

THURSDAY_UPLIFT = 1.1
SUNDAY_FACTOR = 0.8


class VenueCategory(str, enum.Enum):
    """Venue category. Values follow the Places API type names."""

    BAR = "bar"
    NIGHTCLUB = "night_club"
    RESTAURANT = "restaurant"
    CAFE = "cafe"
    THEATER = "movie_theater"
    OTHER = "other"

    @classmethod
    def parse(cls, value: VenueCategory | str | None) -> VenueCategory:
        """Parse a category tag; unknown tags map to OTHER."""
        if isinstance(value, VenueCategory):
            return value
        if not value:
            return cls.OTHER
        key = value.strip().lower()
        try:
            return cls(key)
        except ValueError:
            return _ALIASES.get(key, cls.OTHER)


_ALIASES = {
    "nightclub": VenueCategory.NIGHTCLUB,
    "club": VenueCategory.NIGHTCLUB,
    "café": VenueCategory.CAFE,
    "coffee_shop": VenueCategory.CAFE,
    "theater": VenueCategory.THEATER,
    "theatre": VenueCategory.THEATER,
    "cinema": VenueCategory.THEATER,
    "pub": VenueCategory.BAR,
}


@dataclass(frozen=True)
class CategoryCurves:
    """Typical busyness for a category on weekdays and on weekend nights."""

    weekday: tuple[int, ...]
    weekend: tuple[int, ...]


CATEGORY_CURVES: dict[VenueCategory, CategoryCurves] = {
    # Bars: evening peak, stronger on weekends
    VenueCategory.BAR: CategoryCurves(
        weekday=(5, 5, 5, 5, 5, 10, 15, 20, 25, 30, 35, 40, 45, 50, 55, 60, 65, 70, 75, 80, 70, 60, 50, 40),
        weekend=(10, 10, 5, 5, 5, 10, 20, 30, 40, 50, 60, 70, 80, 85, 90, 95, 100, 95, 90, 85, 80, 75, 70, 60),
    ),
    # Nightclubs: very late peak
    VenueCategory.NIGHTCLUB: CategoryCurves(
        weekday=(5, 5, 5, 5, 5, 5, 5, 5, 10, 15, 20, 25, 30, 35, 40, 45, 50, 60, 70, 80, 90, 95, 90, 80),
        weekend=(20, 20, 15, 10, 5, 5, 5, 5, 10, 20, 30, 40, 50, 60, 70, 80, 90, 95, 100, 100, 95, 90, 85, 80),
    ),
    # Restaurants: lunch and dinner
    VenueCategory.RESTAURANT: CategoryCurves(
        weekday=(5, 5, 5, 5, 5, 10, 20, 30, 40, 50, 60, 70, 80, 75, 70, 60, 50, 40, 70, 80, 75, 60, 40, 20),
        weekend=(10, 5, 5, 5, 5, 10, 25, 40, 55, 70, 80, 85, 90, 85, 80, 75, 70, 65, 80, 85, 80, 70, 50, 30),
    ),
    # Cafés: morning and late afternoon
    VenueCategory.CAFE: CategoryCurves(
        weekday=(5, 5, 5, 5, 10, 20, 40, 60, 80, 90, 85, 70, 60, 50, 55, 60, 70, 75, 65, 50, 35, 20, 10, 5),
        weekend=(5, 5, 5, 5, 10, 20, 35, 50, 70, 85, 90, 85, 75, 65, 60, 65, 70, 65, 55, 40, 25, 15, 10, 5),
    ),
    # Theaters and cinemas: evening
    VenueCategory.THEATER: CategoryCurves(
        weekday=(5, 5, 5, 5, 5, 5, 10, 15, 20, 25, 30, 35, 40, 45, 50, 55, 60, 70, 80, 90, 85, 70, 50, 30),
        weekend=(10, 5, 5, 5, 5, 10, 15, 25, 35, 45, 55, 65, 75, 85, 90, 95, 95, 90, 85, 80, 70, 55, 35, 20),
    ),
}

FALLBACK_CATEGORY = VenueCategory.BAR


def curves_for(category: VenueCategory | str | None) -> CategoryCurves:
    """Curves for a category, falling back to the bar pattern."""
    return CATEGORY_CURVES.get(VenueCategory.parse(category), CATEGORY_CURVES[FALLBACK_CATEGORY])


def _scale(curve: tuple[int, ...], factor: float) -> tuple[int, ...]:
    return tuple(min(round_half_up(v * factor), MAX_POPULARITY) for v in curve)


def generate_default_table(category: VenueCategory | str | None) -> PopularityTable:
    """Generate the default weekly table for a venue category.

    Monday to Wednesday use the weekday curve, Thursday is 10% busier,
    Friday and Saturday use the weekend curve and Sunday is 20% quieter.
    """
    curves = curves_for(category)
    return PopularityTable(
        monday=curves.weekday,
        tuesday=curves.weekday,
        wednesday=curves.weekday,
        thursday=_scale(curves.weekday, THURSDAY_UPLIFT),
        friday=curves.weekend,
        saturday=curves.weekend,
        sunday=_scale(curves.weekday, SUNDAY_FACTOR),
    )


def fit_to_opening_hours(table: PopularityTable, opening_hours: OpeningHours) -> PopularityTable:
    """Zero the hours a venue is closed.

    Closed days become all zeros and hours outside a known open-close window
    are zeroed, including windows that cross midnight. Days without known
    times are left as they are.
    """
    fitted = table
    for day in Weekday:
        day_hours = opening_hours[day]
        if day_hours.closed:
            fitted = fitted.with_day(day, [0] * HOURS_PER_DAY)
        elif day_hours.has_window:
            fitted = fitted.with_day(
                day,
                [v if day_hours.is_open_during(h) else 0 for h, v in enumerate(table[day])],
            )
    return fitted
