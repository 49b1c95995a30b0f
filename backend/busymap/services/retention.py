"""Check-in retention cleanup service."""

import asyncio
import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete

from busymap.config import get_settings
from busymap.database import async_session_maker
from busymap.models import Checkin

logger = logging.getLogger(__name__)


async def cleanup_old_checkins(retention_hours: int | None = None) -> int:
    """Delete check-ins older than the retention period. Returns count of deleted rows."""
    if retention_hours is None:
        retention_hours = get_settings().checkin_retention_hours

    cutoff = datetime.now(UTC) - timedelta(hours=retention_hours)
    async with async_session_maker() as db:
        result = await db.execute(delete(Checkin).where(Checkin.created_at < cutoff))
        await db.commit()

    logger.info(f"Deleted {result.rowcount} check-ins older than {retention_hours} hours")
    return result.rowcount


class RetentionService:
    """Background service for check-in retention cleanup."""

    def __init__(self, interval_hours: int = 1):
        self._interval = interval_hours * 3600
        self._running = False
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        """Start the retention cleanup service."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._cleanup_loop())
        logger.info("Started retention cleanup service")

    async def _cleanup_loop(self) -> None:
        """Periodic cleanup loop."""
        while self._running:
            try:
                await cleanup_old_checkins()
            except Exception as e:
                logger.error(f"Retention cleanup error: {e}")

            await asyncio.sleep(self._interval)

    async def stop(self) -> None:
        """Stop the retention cleanup service."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("Stopped retention cleanup service")


# Global retention service instance
retention_service = RetentionService()
