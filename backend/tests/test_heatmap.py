"""Tests for heatmap aggregation."""

from datetime import UTC, datetime

import pytest

from busymap.popularity.domain import Checkin, PlaceSignal, Venue
from busymap.popularity.errors import InvalidInputError
from busymap.popularity.heatmap import HeatmapPoint, aggregate, place_signal_weight
from busymap.popularity.hours import OpeningHours
from busymap.popularity.table import PopularityTable, Weekday


def _venue(venue_id: str, value: int, **kwargs) -> Venue:
    return Venue(
        id=venue_id,
        latitude=-23.55,
        longitude=-46.63,
        popularity=PopularityTable(**{day.value: [value] * 24 for day in Weekday}),
        **kwargs,
    )


class TestAggregate:
    """Tests for aggregate."""

    def test_empty_input(self):
        assert aggregate([], Weekday.FRIDAY, 22) == []

    def test_one_weighted_point_per_venue(self):
        """By default an open venue is one point weighted value / 100."""
        points = aggregate([_venue("a", 70), _venue("b", 50)], Weekday.FRIDAY, 22)
        assert [p.weight for p in points] == pytest.approx([0.7, 0.5])

    def test_closed_venue_omitted(self):
        closed = _venue(
            "a", 100, opening_hours=OpeningHours.from_dict({"friday": {"closed": True}})
        )
        assert aggregate([closed], Weekday.FRIDAY, 22) == []

    def test_zero_value_omitted(self):
        assert aggregate([_venue("a", 0)], "friday", 22) == []

    def test_venue_without_table_omitted(self):
        venue = Venue(id="a", latitude=0.0, longitude=0.0)
        assert aggregate([venue], "friday", 22) == []

    def test_replication(self):
        """With replication each venue repeats ceil(weight * N) times."""
        assert len(aggregate([_venue("a", 50)], "friday", 22, replication=10)) == 5
        assert len(aggregate([_venue("a", 100)], "friday", 22, replication=10)) == 10
        assert len(aggregate([_venue("a", 1)], "friday", 22, replication=10)) == 1

    def test_replication_must_be_positive(self):
        with pytest.raises(InvalidInputError):
            aggregate([_venue("a", 50)], "friday", 22, replication=0)

    def test_live_checkins(self):
        """Each live check-in contributes a half-weight point."""
        now = datetime(2024, 1, 19, 22, 0, tzinfo=UTC)
        checkins = [
            Checkin(latitude=-23.56, longitude=-46.64, created_at=now),
            Checkin(latitude=-23.57, longitude=-46.65, created_at=now, is_anonymous=True),
        ]
        points = aggregate([], "friday", 22, checkins)
        assert points == [
            HeatmapPoint(-23.56, -46.64, 0.5),
            HeatmapPoint(-23.57, -46.65, 0.5),
        ]

    def test_place_signals(self):
        signal = PlaceSignal(latitude=1.0, longitude=2.0, rating=5.0, user_ratings_total=1000, open_now=True)
        points = aggregate([], "friday", 22, place_signals=[signal])
        assert points[0].weight == pytest.approx(1.3 / 1.5)

    def test_idempotent(self):
        """The same snapshot always yields the same points."""
        venues = [_venue("a", 70), _venue("b", 30)]
        assert aggregate(venues, "saturday", 23) == aggregate(venues, "saturday", 23)

    def test_weights_in_range(self):
        points = aggregate([_venue("a", 100), _venue("b", 1)], "monday", 0, replication=10)
        assert all(0 <= p.weight <= 1 for p in points)

    def test_invalid_hour(self):
        with pytest.raises(InvalidInputError):
            aggregate([_venue("a", 50)], "friday", 24)


class TestPlaceSignalWeight:
    """Tests for place_signal_weight."""

    def test_minimal_signal(self):
        """No rating, reviews or open flag gives the base weight."""
        assert place_signal_weight(PlaceSignal(0.0, 0.0)) == pytest.approx(0.5 / 1.5)

    def test_review_volume_saturates(self):
        few = place_signal_weight(PlaceSignal(0.0, 0.0, user_ratings_total=500))
        many = place_signal_weight(PlaceSignal(0.0, 0.0, user_ratings_total=5000))
        assert few == pytest.approx(0.65 / 1.5)
        assert many == pytest.approx(0.8 / 1.5)

    def test_active_boost_adds_weight(self):
        assert place_signal_weight(PlaceSignal(0.0, 0.0, boost_level=2)) == pytest.approx(0.9 / 1.5)

    def test_boost_capped(self):
        signal = PlaceSignal(0.0, 0.0, rating=5.0, user_ratings_total=1000, open_now=True, boost_level=3)
        assert place_signal_weight(signal) == pytest.approx(1.0)


class TestHeatmapPoint:
    """Tests for HeatmapPoint validation."""

    def test_weight_clamped(self):
        assert HeatmapPoint(0.0, 0.0, 1.7).weight == 1.0
        assert HeatmapPoint(0.0, 0.0, -0.2).weight == 0.0

    def test_coordinates_validated(self):
        with pytest.raises(InvalidInputError):
            HeatmapPoint(91.0, 0.0, 0.5)
        with pytest.raises(InvalidInputError):
            HeatmapPoint(0.0, -181.0, 0.5)


class TestVenueCoordinates:
    """Venues reject coordinates that cannot be placed on the map."""

    @pytest.mark.parametrize(
        "latitude,longitude",
        [(-23.55, -463.0), (95.0, -46.63), (float("nan"), -46.63), (-23.55, float("inf"))],
    )
    def test_invalid_coordinates_rejected(self, latitude, longitude):
        with pytest.raises(InvalidInputError):
            Venue(id="v1", latitude=latitude, longitude=longitude)
