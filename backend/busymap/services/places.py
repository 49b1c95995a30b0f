"""Place queries and popular-times maintenance."""

import logging
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from busymap.database import async_session_maker, utc_now
from busymap.models import Place
from busymap.popularity.domain import DataSource, Venue
from busymap.popularity.errors import InvalidInputError, PopularityError, UpstreamUnavailableError
from busymap.popularity.hours import OpeningHours
from busymap.popularity.patterns import fit_to_opening_hours, generate_default_table
from busymap.popularity.table import PopularityTable

logger = logging.getLogger(__name__)


class ManualDataProtectedError(PopularityError):
    """The place has manually entered popular times that must not be replaced."""


async def list_places(db: AsyncSession, category: str | None = None) -> list[Place]:
    """All places ordered by name, optionally filtered by category."""
    query = select(Place).order_by(Place.name)
    if category:
        query = query.where(Place.category == category)
    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        logger.error(f"Failed to load places: {e}")
        raise UpstreamUnavailableError("Place store unavailable") from e
    return list(result.scalars().all())


async def get_place(db: AsyncSession, place_id: str) -> Place | None:
    """Place by id, or None when the id is unknown or not a UUID."""
    try:
        UUID(place_id)
    except ValueError:
        return None
    try:
        result = await db.execute(select(Place).where(Place.id == place_id))
    except SQLAlchemyError as e:
        logger.error(f"Failed to load place {place_id}: {e}")
        raise UpstreamUnavailableError("Place store unavailable") from e
    return result.scalar()


def venue_snapshots(places: list[Place]) -> list[tuple[Place, Venue]]:
    """Pair each place with its engine snapshot.

    Places whose stored coordinates, opening hours or popular times are
    invalid are skipped with a warning rather than failing the whole map.
    """
    snapshots = []
    for place in places:
        try:
            snapshots.append((place, place.to_venue()))
        except InvalidInputError as e:
            logger.warning(f"Skipping place {place.id} ({place.name}): {e}")
    return snapshots


async def load_venues(db: AsyncSession) -> list[Venue]:
    """Snapshot every valid place for the popularity engine."""
    return [venue for _, venue in venue_snapshots(await list_places(db))]


def set_manual_popular_times(place: Place, table: PopularityTable) -> Place:
    """Store an admin-edited table and mark it as manual."""
    place.popular_times = table.to_dict()
    place.data_source = DataSource.MANUAL
    place.popular_times_updated_at = utc_now()
    logger.info(f"Manual popular times saved for place {place.id} ({place.name})")
    return place


def apply_default_popular_times(place: Place) -> PopularityTable:
    """Fill a place with its category's default table, fitted to its opening hours.

    Raises ManualDataProtectedError for places with manual data.
    """
    if place.data_source == DataSource.MANUAL:
        raise ManualDataProtectedError(
            f"Place {place.id} has manual popular times; refusing to overwrite"
        )
    table = generate_default_table(place.category)
    if place.opening_hours:
        try:
            table = fit_to_opening_hours(table, OpeningHours.from_dict(place.opening_hours))
        except InvalidInputError as e:
            logger.warning(f"Ignoring opening hours of place {place.id} ({place.name}): {e}")
    place.popular_times = table.to_dict()
    place.data_source = DataSource.SIMULATED
    place.popular_times_updated_at = utc_now()
    return table


async def fill_missing_popular_times(db: AsyncSession) -> int:
    """Generate default tables for places that have none. Returns the count filled."""
    query = select(Place).where(
        Place.popular_times.is_(None),
        or_(Place.data_source.is_(None), Place.data_source != DataSource.MANUAL),
    )
    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        logger.error(f"Failed to load places without popular times: {e}")
        raise UpstreamUnavailableError("Place store unavailable") from e

    filled = 0
    for place in result.scalars().all():
        apply_default_popular_times(place)
        filled += 1
    return filled


async def populate_default_popular_times() -> int:
    """Startup task: fill places without popular times from category defaults."""
    async with async_session_maker() as db:
        filled = await fill_missing_popular_times(db)
        await db.commit()
    if filled:
        logger.info(f"Generated default popular times for {filled} places")
    return filled
