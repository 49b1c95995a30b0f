"""Tests for check-in retention cleanup."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from busymap.services.retention import RetentionService, cleanup_old_checkins


def _session_maker(rowcount: int):
    result = MagicMock()
    result.rowcount = rowcount
    session = AsyncMock()
    session.execute = AsyncMock(return_value=result)
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session), session


class TestCleanupOldCheckins:
    """Tests for cleanup_old_checkins."""

    @pytest.mark.asyncio
    async def test_deletes_and_commits(self):
        maker, session = _session_maker(7)
        with patch("busymap.services.retention.async_session_maker", maker):
            deleted = await cleanup_old_checkins(retention_hours=2)
        assert deleted == 7
        session.execute.assert_awaited_once()
        session.commit.assert_awaited_once()


class TestRetentionService:
    """Tests for the background retention service."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        service = RetentionService()
        with patch(
            "busymap.services.retention.cleanup_old_checkins", AsyncMock(return_value=0)
        ) as mock_cleanup:
            await service.start()
            await service.start()
            # Let the loop run its first pass
            for _ in range(3):
                if mock_cleanup.await_count:
                    break
                await asyncio.sleep(0)
            await service.stop()
        assert mock_cleanup.await_count == 1
