"""Event and attendee models."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from busymap.database import Base, utc_now
from busymap.popularity.domain import EventCategory, EventStatus, ScheduledEvent

ATTENDEE_CONFIRMED = "confirmed"


class Event(Base):
    """A user-created event at a venue."""

    __tablename__ = "events"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    venue_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("places.id", ondelete="CASCADE"),
        index=True,
    )
    # User id from the external auth provider
    creator_id: Mapped[str] = mapped_column(String(128), nullable=False)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(20), default=EventCategory.OTHER.value)
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    status: Mapped[EventStatus] = mapped_column(
        Enum(EventStatus),
        default=EventStatus.PENDING,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # Paid promotion raising the venue's weight on the live map until boost_until
    is_boosted: Mapped[bool] = mapped_column(Boolean, default=False)
    boost_level: Mapped[int] = mapped_column(Integer, default=1)
    boost_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
    )

    # Relationships
    venue: Mapped["Place"] = relationship("Place", back_populates="events")  # noqa: F821
    attendees: Mapped[list["EventAttendee"]] = relationship(
        "EventAttendee",
        back_populates="event",
        cascade="all, delete-orphan",
    )

    def to_scheduled_event(self) -> ScheduledEvent:
        """Immutable snapshot for the prediction scorer. Requires attendees to be loaded."""
        return ScheduledEvent(
            id=self.id,
            category=EventCategory.parse(self.category),
            start_at=self.start_at,
            end_at=self.end_at,
            venue_id=self.venue_id,
            status=self.status,
            is_active=self.is_active,
            attendee_ids=frozenset(
                a.user_id for a in self.attendees if a.status == ATTENDEE_CONFIRMED
            ),
        )


class EventAttendee(Base):
    """A user's RSVP to an event (confirmed, maybe or declined)."""

    __tablename__ = "event_attendees"
    __table_args__ = (
        Index("idx_event_attendees_event_user", "event_id", "user_id", unique=True),
    )

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    event_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=ATTENDEE_CONFIRMED)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
    )

    event: Mapped["Event"] = relationship("Event", back_populates="attendees")
