"""Heatmap layers: load a snapshot from the store and hand it to the engine."""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from busymap.config import get_settings
from busymap.models import Event, Place
from busymap.popularity.density import DensityCell, density_grid
from busymap.popularity.domain import Checkin as CheckinSnapshot
from busymap.popularity.domain import EventStatus, PlaceSignal, ScheduledEvent, Venue
from busymap.popularity.errors import InvalidInputError, UpstreamUnavailableError
from busymap.popularity.heatmap import HeatmapPoint, aggregate
from busymap.popularity.prediction import predict
from busymap.popularity.resolver import is_open_at
from busymap.popularity.table import Weekday
from busymap.services.checkins import list_recent_checkins
from busymap.services.places import list_places, load_venues, venue_snapshots

logger = logging.getLogger(__name__)


async def recent_checkins(db: AsyncSession, now: datetime, minutes: int) -> list[CheckinSnapshot]:
    """Engine snapshots of the check-ins inside the live window."""
    rows = await list_recent_checkins(db, now, minutes)
    return [checkin.to_checkin() for checkin in rows]


async def upcoming_events(db: AsyncSession, now: datetime) -> list[ScheduledEvent]:
    """Approved, active events at a venue that start after ``now``."""
    try:
        result = await db.execute(
            select(Event)
            .options(selectinload(Event.attendees))
            .where(
                Event.status == EventStatus.APPROVED,
                Event.is_active.is_(True),
                Event.start_at > now,
                Event.venue_id.isnot(None),
            )
            .order_by(Event.start_at)
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to load upcoming events: {e}")
        raise UpstreamUnavailableError("Event store unavailable") from e

    events = []
    for event in result.scalars().all():
        try:
            events.append(event.to_scheduled_event())
        except InvalidInputError as e:
            logger.warning(f"Skipping event {event.id}: {e}")
    return events


async def active_boosts(db: AsyncSession, now: datetime) -> dict[str, int]:
    """Highest boost level per venue among approved events still boosted at ``now``."""
    try:
        result = await db.execute(
            select(Event.venue_id, func.max(func.coalesce(Event.boost_level, 1)))
            .where(
                Event.status == EventStatus.APPROVED,
                Event.is_active.is_(True),
                Event.is_boosted.is_(True),
                Event.venue_id.isnot(None),
                or_(Event.boost_until.is_(None), Event.boost_until > now),
            )
            .group_by(Event.venue_id)
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to load event boosts: {e}")
        raise UpstreamUnavailableError("Event store unavailable") from e
    return {venue_id: level for venue_id, level in result.all()}


def place_signals(
    snapshots: list[tuple[Place, Venue]],
    local: datetime,
    boosts: dict[str, int],
) -> list[PlaceSignal]:
    """Signals for places with ratings, reviews or an active boost."""
    signals = []
    for place, venue in snapshots:
        boost_level = boosts.get(place.id, 0)
        if not (place.rating or place.user_ratings_total or boost_level):
            continue
        signals.append(
            PlaceSignal(
                latitude=venue.latitude,
                longitude=venue.longitude,
                rating=place.rating,
                user_ratings_total=place.user_ratings_total,
                open_now=is_open_at(venue, local, local.hour),
                boost_level=boost_level,
            )
        )
    return signals


async def live_heatmap(db: AsyncSession, now: datetime) -> list[HeatmapPoint]:
    """Venue busyness at ``now`` plus live check-ins and place signals."""
    settings = get_settings()
    local = now.astimezone(ZoneInfo(settings.reference_timezone))
    snapshots = venue_snapshots(await list_places(db))
    venues = [venue for _, venue in snapshots]
    checkins = await recent_checkins(db, now, settings.live_window_minutes)
    signals = place_signals(snapshots, local, await active_boosts(db, now))
    points = aggregate(
        venues,
        local,
        local.hour,
        checkins,
        signals,
        replication=settings.heatmap_replication,
        checkin_weight=settings.checkin_weight,
        tz=settings.reference_timezone,
    )
    logger.debug(
        f"Live heatmap: {len(venues)} venues, {len(checkins)} check-ins, "
        f"{len(signals)} place signals, {len(points)} points"
    )
    return points


async def venue_heatmap(db: AsyncSession, day: Weekday, hour: int) -> list[HeatmapPoint]:
    """Venue busyness at a selected weekday and hour, without live signals."""
    settings = get_settings()
    venues = await load_venues(db)
    return aggregate(venues, day, hour, replication=settings.heatmap_replication)


async def prediction_heatmap(db: AsyncSession, now: datetime) -> list[HeatmapPoint]:
    """One weighted point per upcoming event, scored by attendance and venue popularity."""
    settings = get_settings()
    events = await upcoming_events(db, now)
    if not events:
        return []
    venues = await load_venues(db)
    points = predict(events, venues, now, tz=settings.reference_timezone)
    logger.debug(f"Prediction heatmap: {len(events)} events, {len(points)} points")
    return points


async def venue_density(
    db: AsyncSession,
    day: Weekday,
    hour: int,
    cell_size_km: float,
) -> list[DensityCell]:
    """Venue busyness at a weekday and hour, binned into a grid."""
    venues = await load_venues(db)
    return density_grid(aggregate(venues, day, hour), cell_size_km)
