"""Tests for the weekly popularity table and weekday helpers."""

from datetime import date

import pytest

from busymap.popularity.errors import InvalidInputError
from busymap.popularity.table import (
    DEFAULT_PEAK_HOUR,
    PopularityTable,
    Weekday,
    clamp_popularity,
    round_half_up,
    validate_hour,
)


def _constant_table(value: int) -> PopularityTable:
    return PopularityTable(**{day.value: [value] * 24 for day in Weekday})


class TestWeekday:
    """Tests for the Sunday-first weekday enum."""

    def test_sunday_first_indexes(self):
        """Index 0 is Sunday and 6 is Saturday."""
        assert Weekday.SUNDAY.index == 0
        assert Weekday.MONDAY.index == 1
        assert Weekday.SATURDAY.index == 6

    def test_from_date(self):
        """Calendar dates map to the right weekday."""
        assert Weekday.from_date(date(2024, 1, 15)) == Weekday.MONDAY
        assert Weekday.from_date(date(2024, 1, 14)) == Weekday.SUNDAY
        assert Weekday.from_date(date(2024, 1, 20)) == Weekday.SATURDAY

    def test_shift_wraps_saturday_to_sunday(self):
        """Shifting past Saturday wraps around to Sunday."""
        assert Weekday.SATURDAY.shift(1) == Weekday.SUNDAY
        assert Weekday.FRIDAY.shift(3) == Weekday.MONDAY
        assert Weekday.MONDAY.shift(7) == Weekday.MONDAY

    def test_parse_accepts_names_and_indexes(self):
        """Names are case-insensitive and indexes are Sunday-first."""
        assert Weekday.parse("Friday") == Weekday.FRIDAY
        assert Weekday.parse(" monday ") == Weekday.MONDAY
        assert Weekday.parse(0) == Weekday.SUNDAY
        assert Weekday.parse(Weekday.TUESDAY) == Weekday.TUESDAY

    @pytest.mark.parametrize("value", ["funday", "", 7, -1, True, None, 2.5])
    def test_parse_rejects_invalid(self, value):
        """Unknown names and out-of-range indexes raise InvalidInputError."""
        with pytest.raises(InvalidInputError):
            Weekday.parse(value)

    def test_labels(self):
        """Display labels are Portuguese."""
        assert Weekday.SUNDAY.label == "Domingo"
        assert Weekday.SATURDAY.label == "Sábado"


class TestRounding:
    """Tests for value normalization."""

    def test_round_half_up(self):
        """Halves round up, unlike Python's banker's rounding."""
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2

    def test_clamp_popularity(self):
        """Values are rounded and clamped into [0, 100]."""
        assert clamp_popularity(150) == 100
        assert clamp_popularity(-5) == 0
        assert clamp_popularity(42.5) == 43
        assert clamp_popularity(float("inf")) == 100

    def test_clamp_rejects_non_numbers(self):
        """Strings, booleans and NaN are rejected."""
        with pytest.raises(InvalidInputError):
            clamp_popularity("50")
        with pytest.raises(InvalidInputError):
            clamp_popularity(True)
        with pytest.raises(InvalidInputError):
            clamp_popularity(float("nan"))

    @pytest.mark.parametrize("hour", [-1, 24, 3.0, "3", None])
    def test_validate_hour_rejects(self, hour):
        """Hours outside 0-23 or not integers are rejected."""
        with pytest.raises(InvalidInputError):
            validate_hour(hour)

    def test_validate_hour_accepts_bounds(self):
        """0 and 23 are valid hours."""
        assert validate_hour(0) == 0
        assert validate_hour(23) == 23


class TestPopularityTable:
    """Tests for PopularityTable construction and queries."""

    def test_values_are_clamped(self):
        """Out-of-range values are clamped on construction."""
        table = _constant_table(50).with_day("monday", [150] * 12 + [-10] * 12)
        assert table.monday[:12] == (100,) * 12
        assert table.monday[12:] == (0,) * 12
        assert table.tuesday == (50,) * 24

    def test_wrong_length_rejected(self):
        """Every day needs exactly 24 values."""
        with pytest.raises(InvalidInputError, match="24"):
            _constant_table(10).with_day("friday", [10] * 23)

    def test_value_at(self):
        """Lookup by weekday and hour."""
        table = PopularityTable.zeros().with_day("saturday", list(range(24)))
        assert table.value_at(Weekday.SATURDAY, 22) == 22
        assert table.value_at("saturday", 0) == 0
        assert table.value_at(6, 5) == 5

    def test_value_at_rejects_bad_hour(self):
        """Hour 24 is out of range."""
        with pytest.raises(InvalidInputError):
            PopularityTable.zeros().value_at("monday", 24)

    def test_peak_hour_first_wins_on_ties(self):
        """The earliest hour with the maximum value is the peak."""
        values = [0] * 24
        values[18] = 90
        values[21] = 90
        table = PopularityTable.zeros().with_day("friday", values)
        assert table.peak_hour("friday") == 18

    def test_peak_hour_defaults_for_empty_day(self):
        """A day with no busy hour reports the default peak hour."""
        assert PopularityTable.zeros().peak_hour("monday") == DEFAULT_PEAK_HOUR

    def test_average_rounds_half_up(self):
        """Average of 0..23 is 11.5, rounded to 12."""
        table = PopularityTable.zeros().with_day("monday", list(range(24)))
        assert table.average("monday") == 12

    def test_to_dict_shape(self):
        """Persisted shape is monday..sunday with 24 ints each."""
        data = _constant_table(30).to_dict()
        assert list(data) == [
            "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
        ]
        assert all(len(v) == 24 for v in data.values())

    def test_from_dict_round_trip(self):
        """A persisted table loads back to an equal table."""
        table = PopularityTable.zeros().with_day("sunday", list(range(24)))
        assert PopularityTable.from_dict(table.to_dict()) == table

    def test_from_dict_missing_day_strict(self):
        """Missing days are rejected without fill_missing."""
        data = _constant_table(10).to_dict()
        del data["sunday"]
        with pytest.raises(InvalidInputError, match="sunday"):
            PopularityTable.from_dict(data)

    def test_from_dict_fill_missing(self):
        """Lenient loading pads short days and fills absent ones with zeros."""
        table = PopularityTable.from_dict(
            {"monday": [50] * 10, "friday": [70] * 30, "tuesday": [None] * 24},
            fill_missing=True,
        )
        assert table.monday == (50,) * 10 + (0,) * 14
        assert table.friday == (70,) * 24
        assert table.tuesday == (0,) * 24
        assert table.sunday == (0,) * 24

    def test_from_dict_rejects_non_list_day(self):
        """A day that is not a list is rejected even when lenient."""
        with pytest.raises(InvalidInputError):
            PopularityTable.from_dict({"monday": "busy"}, fill_missing=True)

    def test_from_dict_rejects_non_mapping(self):
        """The document must be an object."""
        with pytest.raises(InvalidInputError):
            PopularityTable.from_dict([1, 2, 3])
