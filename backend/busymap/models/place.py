"""Place model for venues shown on the map."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Double, Enum, Float, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from busymap.database import Base, utc_now
from busymap.popularity.domain import DataSource, Venue
from busymap.popularity.hours import OpeningHours
from busymap.popularity.patterns import VenueCategory
from busymap.popularity.table import PopularityTable


class Place(Base):
    """A venue (bar, club, restaurant...) with its weekly popularity."""

    __tablename__ = "places"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    google_place_id: Mapped[str | None] = mapped_column(String(255), unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(Text)

    # Position
    latitude: Mapped[float] = mapped_column(Double, nullable=False)
    longitude: Mapped[float] = mapped_column(Double, nullable=False)

    # Places API metadata
    category: Mapped[str] = mapped_column(String(50), default=VenueCategory.OTHER.value)
    rating: Mapped[float | None] = mapped_column(Float)
    user_ratings_total: Mapped[int | None] = mapped_column(Integer)

    # {"monday": {"open": "18:00", "close": "02:00", "closed": false}, ...}
    opening_hours: Mapped[dict | None] = mapped_column(
        JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")
    )
    # {"monday": [24 ints], ...}
    popular_times: Mapped[dict | None] = mapped_column(
        JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")
    )
    data_source: Mapped[DataSource | None] = mapped_column(Enum(DataSource))
    popular_times_updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
    )

    # Relationships
    events: Mapped[list["Event"]] = relationship(  # noqa: F821
        "Event",
        back_populates="venue",
        cascade="all, delete-orphan",
    )

    def to_venue(self) -> Venue:
        """Immutable snapshot for the popularity engine.

        Raises InvalidInputError if the stored opening hours are malformed.
        """
        return Venue(
            id=self.id,
            latitude=self.latitude,
            longitude=self.longitude,
            category=VenueCategory.parse(self.category),
            opening_hours=(
                OpeningHours.from_dict(self.opening_hours) if self.opening_hours else None
            ),
            popularity=(
                PopularityTable.from_dict(self.popular_times, fill_missing=True)
                if self.popular_times
                else None
            ),
            data_source=self.data_source or DataSource.SIMULATED,
        )
