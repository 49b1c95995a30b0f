"""Place and popular-times endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from busymap.clock import local_now
from busymap.database import get_db
from busymap.models import Place
from busymap.popularity.resolver import next_opening_time, resolve
from busymap.popularity.table import Weekday
from busymap.schemas.places import (
    NextOpeningResponse,
    PlaceResponse,
    PopularityResponse,
    PopularTimesUpdate,
)
from busymap.services.places import (
    ManualDataProtectedError,
    apply_default_popular_times,
    get_place,
    list_places,
    set_manual_popular_times,
)

router = APIRouter(prefix="/api/places", tags=["places"])


async def _get_place_or_404(db: AsyncSession, place_id: str) -> Place:
    place = await get_place(db, place_id)
    if not place:
        raise HTTPException(status_code=404, detail="Place not found")
    return place


@router.get("", response_model=list[PlaceResponse])
async def get_places(
    category: Annotated[str | None, Query(description="Filter by venue category")] = None,
    db: AsyncSession = Depends(get_db),
) -> list[PlaceResponse]:
    """List places with their popular times and opening hours."""
    places = await list_places(db, category)
    return [PlaceResponse.model_validate(p) for p in places]


@router.get("/{place_id}", response_model=PlaceResponse)
async def get_place_detail(place_id: str, db: AsyncSession = Depends(get_db)) -> PlaceResponse:
    """Get a single place."""
    return PlaceResponse.model_validate(await _get_place_or_404(db, place_id))


@router.get("/{place_id}/popularity", response_model=PopularityResponse)
async def get_place_popularity(
    place_id: str,
    day: Annotated[str | None, Query(description="Weekday name; defaults to today")] = None,
    hour: Annotated[int | None, Query(description="Hour 0-23; defaults to the current hour")] = None,
    db: AsyncSession = Depends(get_db),
) -> PopularityResponse:
    """Resolved busyness of a place, with label, color and next opening when closed."""
    place = await _get_place_or_404(db, place_id)
    venue = place.to_venue()

    now = local_now()
    weekday = Weekday.parse(day) if day is not None else Weekday.from_date(now.date())
    if hour is None:
        hour = now.hour

    resolution = resolve(venue, weekday, hour)
    next_opening = None
    if resolution.is_closed:
        opening = next_opening_time(venue, weekday, hour)
        if opening:
            next_opening = NextOpeningResponse(
                day=opening.day.value,
                day_label=opening.day_label,
                time=opening.time.strftime("%H:%M"),
                is_today=opening.is_today,
            )

    return PopularityResponse(
        place_id=place.id,
        day=weekday.value,
        hour=hour,
        value=resolution.value,
        is_closed=resolution.is_closed,
        label=resolution.label,
        color=resolution.color,
        peak_hour=venue.popularity.peak_hour(weekday) if venue.popularity else None,
        average=venue.popularity.average(weekday) if venue.popularity else None,
        data_source=venue.data_source if venue.popularity else None,
        next_opening=next_opening,
    )


@router.put("/{place_id}/popular-times", response_model=PlaceResponse)
async def update_popular_times(
    place_id: str,
    update: PopularTimesUpdate,
    db: AsyncSession = Depends(get_db),
) -> PlaceResponse:
    """Save manually edited popular times. The place is marked as manual data."""
    place = await _get_place_or_404(db, place_id)
    set_manual_popular_times(place, update.popular_times.to_table())
    await db.flush()
    await db.refresh(place)
    return PlaceResponse.model_validate(place)


@router.post("/{place_id}/popular-times/generate", response_model=PlaceResponse)
async def generate_popular_times(
    place_id: str,
    db: AsyncSession = Depends(get_db),
) -> PlaceResponse:
    """Fill popular times from the category default. Refuses to replace manual data."""
    place = await _get_place_or_404(db, place_id)
    try:
        apply_default_popular_times(place)
    except ManualDataProtectedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    await db.flush()
    await db.refresh(place)
    return PlaceResponse.model_validate(place)
