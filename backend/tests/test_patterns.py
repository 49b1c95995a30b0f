"""Tests for default popularity patterns by venue category."""

import pytest

from busymap.popularity.hours import OpeningHours
from busymap.popularity.patterns import (
    CATEGORY_CURVES,
    VenueCategory,
    curves_for,
    fit_to_opening_hours,
    generate_default_table,
)
from busymap.popularity.table import PopularityTable, Weekday, round_half_up

class TestVenueCategory:
    """Tests for category parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("bar", VenueCategory.BAR),
            ("night_club", VenueCategory.NIGHTCLUB),
            ("nightclub", VenueCategory.NIGHTCLUB),
            ("Café", VenueCategory.CAFE),
            ("cinema", VenueCategory.THEATER),
            ("pub", VenueCategory.BAR),
            ("bowling_alley", VenueCategory.OTHER),
            (None, VenueCategory.OTHER),
            ("", VenueCategory.OTHER),
        ],
    )
    def test_parse(self, value, expected):
        """Places API types and common aliases map to a category."""
        assert VenueCategory.parse(value) == expected

class TestDefaultTables:
    """Tests for generate_default_table."""

    def test_unknown_category_falls_back_to_bar(self):
        """Categories without curves use the bar pattern."""
        assert curves_for("bowling_alley") == CATEGORY_CURVES[VenueCategory.BAR]
        assert generate_default_table("other") == generate_default_table("bar")

    def test_weekday_days_use_weekday_curve(self):
        """Monday to Wednesday share the weekday curve."""
        table = generate_default_table("restaurant")
        curve = CATEGORY_CURVES[VenueCategory.RESTAURANT].weekday
        assert table.monday == curve
        assert table.tuesday == curve
        assert table.wednesday == curve

    def test_weekend_nights_use_weekend_curve(self):
        """Friday and Saturday use the weekend curve."""
        table = generate_default_table("night_club")
        curve = CATEGORY_CURVES[VenueCategory.NIGHTCLUB].weekend
        assert table.friday == curve
        assert table.saturday == curve

    def test_thursday_uplift(self):
        """Thursday is 10% busier than a weekday."""
        table = generate_default_table("bar")
        assert table.thursday[19] == 88
        assert table.thursday[20] == 77

    def test_thursday_uplift_clamped(self):
        """Uplifted values never exceed 100."""
        table = generate_default_table("night_club")
        assert table.thursday[21] == 100
        assert max(table.thursday) == 100

    def test_sunday_is_quieter(self):
        """Sunday is 20% quieter than a weekday."""
        table = generate_default_table("bar")
        assert table.sunday[19] == 64

    @pytest.mark.parametrize("category", list(VenueCategory))
    @pytest.mark.parametrize("hour", range(24))
    def test_thursday_and_sunday_scaling_every_hour(self, category, hour):
        """Thursday is weekday x1.1 capped at 100, Sunday weekday x0.8, rounded half-up."""
        weekday = curves_for(category).weekday
        table = generate_default_table(category)
        assert table.thursday[hour] == min(round_half_up(weekday[hour] * 1.1), 100)
        assert table.sunday[hour] == round_half_up(weekday[hour] * 0.8)

    def test_cafe_morning_peak(self):
        """Cafés are very busy on weekday mornings."""
        table = generate_default_table(VenueCategory.CAFE)
        assert table.value_at(Weekday.MONDAY, 8) == CATEGORY_CURVES[VenueCategory.CAFE].weekday[8]
        assert table.value_at(Weekday.MONDAY, 8) >= 80
        assert table.peak_hour(Weekday.MONDAY) == 9

    @pytest.mark.parametrize("category", list(VenueCategory))
    def test_every_category_produces_valid_table(self, category):
        """Every generated table is 7 x 24 within range."""
        table = generate_default_table(category)
        for day in Weekday:
            assert len(table[day]) == 24
            assert all(0 <= v <= 100 for v in table[day])

class TestFitToOpeningHours:
    """Tests for zeroing hours outside the opening window."""

    def _table(self):
        return PopularityTable(**{day.value: [50] * 24 for day in Weekday})

    def test_closed_day_zeroed(self):
        hours = OpeningHours.from_dict({"wednesday": {"closed": True}})
        fitted = fit_to_opening_hours(self._table(), hours)
        assert fitted.wednesday == (0,) * 24
        assert fitted.thursday == (50,) * 24

    def test_normal_window(self):
        hours = OpeningHours.from_dict({"monday": {"open": "10:00", "close": "22:00"}})
        fitted = fit_to_opening_hours(self._table(), hours)
        assert fitted.monday == (0,) * 10 + (50,) * 12 + (0,) * 2

    def test_window_crossing_midnight(self):
        hours = OpeningHours.from_dict({"saturday": {"open": "18:00", "close": "02:00"}})
        fitted = fit_to_opening_hours(self._table(), hours)
        assert fitted.saturday == (50,) * 2 + (0,) * 16 + (50,) * 6

    def test_unknown_times_untouched(self):
        hours = OpeningHours.from_dict({"friday": {"open": "20:00"}})
        assert fit_to_opening_hours(self._table(), hours) == self._table()

    def test_category_table_stays_pure(self):
        """The category default does not depend on any venue's hours."""
        hours = OpeningHours.from_dict({"monday": {"closed": True}})
        fit_to_opening_hours(generate_default_table("bar"), hours)
        assert generate_default_table("bar").monday == CATEGORY_CURVES[VenueCategory.BAR].weekday
