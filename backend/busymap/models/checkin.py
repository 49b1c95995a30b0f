"""Check-in model for live crowd presence."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, Double, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from busymap.database import Base, utc_now
from busymap.popularity.domain import Checkin as CheckinSnapshot


class Checkin(Base):
    """A user (or anonymous session) reporting presence at a location."""

    __tablename__ = "checkins"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    venue_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("places.id", ondelete="SET NULL"),
        index=True,
    )
    user_id: Mapped[str | None] = mapped_column(String(128))
    session_id: Mapped[str | None] = mapped_column(String(128))  # anonymous users

    latitude: Mapped[float] = mapped_column(Double, nullable=False)
    longitude: Mapped[float] = mapped_column(Double, nullable=False)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        index=True,
    )

    def to_checkin(self) -> CheckinSnapshot:
        return CheckinSnapshot(
            latitude=self.latitude,
            longitude=self.longitude,
            created_at=self.created_at,
            venue_id=self.venue_id,
            is_anonymous=bool(self.is_anonymous),
        )
