"""Check-in storage."""

import logging
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from busymap.models import Checkin
from busymap.popularity.errors import UpstreamUnavailableError
from busymap.schemas.checkins import CheckinCreate

logger = logging.getLogger(__name__)


async def create_checkin(db: AsyncSession, data: CheckinCreate) -> Checkin:
    checkin = Checkin(
        venue_id=data.venue_id,
        user_id=None if data.is_anonymous else data.user_id,
        session_id=data.session_id,
        latitude=data.latitude,
        longitude=data.longitude,
        is_anonymous=data.is_anonymous,
    )
    db.add(checkin)
    await db.flush()
    await db.refresh(checkin)
    logger.debug(f"Check-in {checkin.id} at ({checkin.latitude}, {checkin.longitude})")
    return checkin


async def list_recent_checkins(db: AsyncSession, now: datetime, minutes: int) -> list[Checkin]:
    """Check-ins created within the last ``minutes`` before ``now``, newest first."""
    cutoff = now - timedelta(minutes=minutes)
    try:
        result = await db.execute(
            select(Checkin)
            .where(Checkin.created_at > cutoff, Checkin.created_at <= now)
            .order_by(Checkin.created_at.desc())
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to load recent check-ins: {e}")
        raise UpstreamUnavailableError("Check-in store unavailable") from e
    return list(result.scalars().all())
