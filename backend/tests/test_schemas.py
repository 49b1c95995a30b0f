"""Tests for Pydantic schemas."""

import pytest
from pydantic import ValidationError

from busymap.popularity.domain import DataSource
from busymap.popularity.patterns import generate_default_table
from busymap.schemas.checkins import CheckinCreate
from busymap.schemas.places import PlaceResponse, PopularTimesSchema, PopularTimesUpdate

DAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def _week(value=50):
    return {day: [value] * 24 for day in DAYS}


class TestPopularTimesSchema:
    """Tests for popular times schemas."""

    def test_valid(self):
        schema = PopularTimesSchema(**_week())
        assert schema.monday == [50] * 24

    def test_values_clamped(self):
        """Out-of-range values are clamped rather than rejected."""
        data = _week()
        data["friday"] = [150] * 12 + [-20] * 12
        schema = PopularTimesSchema(**data)
        assert schema.friday == [100] * 12 + [0] * 12

    def test_wrong_length_rejected(self):
        data = _week()
        data["saturday"] = [50] * 23
        with pytest.raises(ValidationError):
            PopularTimesSchema(**data)

    def test_missing_day_rejected(self):
        data = _week()
        del data["sunday"]
        with pytest.raises(ValidationError):
            PopularTimesSchema(**data)

    def test_to_table(self):
        table = PopularTimesSchema(**_week(30)).to_table()
        assert table.value_at("sunday", 23) == 30

    def test_from_table(self):
        table = generate_default_table("bar")
        assert PopularTimesSchema.from_table(table).to_table() == table

    def test_update_accepts_camel_case(self):
        update = PopularTimesUpdate.model_validate({"popularTimes": _week(), "dataSource": "manual"})
        assert update.data_source == "manual"

    def test_update_rejects_other_source(self):
        with pytest.raises(ValidationError):
            PopularTimesUpdate.model_validate({"popularTimes": _week(), "dataSource": "simulated"})


class TestPlaceResponse:
    """Tests for PlaceResponse serialization."""

    def test_camel_case_output(self):
        response = PlaceResponse(
            id="p1",
            google_place_id="ChIJ123",
            name="Bar do Zé",
            latitude=-23.55,
            longitude=-46.63,
            category="bar",
            user_ratings_total=120,
            opening_hours={"monday": {"open": "18:00", "close": "02:00"}},
            data_source=DataSource.MANUAL,
        )
        data = response.model_dump(mode="json", by_alias=True)
        assert data["placeId"] == "ChIJ123"
        assert data["userRatingsTotal"] == 120
        assert data["dataSource"] == "manual"
        assert data["openingHours"]["monday"] == {"open": "18:00", "close": "02:00", "closed": False}


class TestCheckinCreate:
    """Tests for CheckinCreate."""

    def test_user_checkin(self):
        checkin = CheckinCreate(latitude=-23.55, longitude=-46.63, user_id="u1")
        assert not checkin.is_anonymous

    def test_anonymous_requires_session(self):
        with pytest.raises(ValidationError, match="session_id"):
            CheckinCreate(latitude=-23.55, longitude=-46.63, is_anonymous=True)

    def test_anonymous_with_session(self):
        checkin = CheckinCreate.model_validate(
            {"latitude": 1.0, "longitude": 2.0, "isAnonymous": True, "sessionId": "s1"}
        )
        assert checkin.session_id == "s1"

    def test_user_id_required_when_not_anonymous(self):
        with pytest.raises(ValidationError, match="user_id"):
            CheckinCreate(latitude=-23.55, longitude=-46.63)

    def test_coordinates_validated(self):
        with pytest.raises(ValidationError):
            CheckinCreate(latitude=95.0, longitude=0.0, user_id="u1")
