"""Check-in endpoints feeding the live heatmap."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from busymap.clock import local_now
from busymap.database import get_db
from busymap.schemas.checkins import CheckinCreate, CheckinResponse
from busymap.services.checkins import create_checkin, list_recent_checkins
from busymap.services.places import get_place

router = APIRouter(prefix="/api/checkins", tags=["checkins"])


@router.post("", response_model=CheckinResponse, status_code=201)
async def post_checkin(
    data: CheckinCreate,
    db: AsyncSession = Depends(get_db),
) -> CheckinResponse:
    """Report presence at a location, optionally tied to a venue."""
    if data.venue_id and not await get_place(db, data.venue_id):
        raise HTTPException(status_code=404, detail="Place not found")
    checkin = await create_checkin(db, data)
    return CheckinResponse.model_validate(checkin)


@router.get("/recent", response_model=list[CheckinResponse])
async def get_recent_checkins(
    minutes: Annotated[
        int, Query(ge=1, le=1440, description="Look-back window in minutes")
    ] = 60,
    db: AsyncSession = Depends(get_db),
) -> list[CheckinResponse]:
    """Check-ins from the last ``minutes`` minutes, newest first."""
    checkins = await list_recent_checkins(db, local_now(), minutes)
    return [CheckinResponse.model_validate(c) for c in checkins]
