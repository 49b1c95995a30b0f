"""Heatmap layer endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from busymap.clock import local_now
from busymap.database import get_db
from busymap.popularity.heatmap import HeatmapPoint
from busymap.popularity.table import Weekday
from busymap.schemas.heatmap import (
    DensityCellResponse,
    DensityResponse,
    HeatmapPointResponse,
    HeatmapResponse,
)
from busymap.services import heatmap as heatmap_service

router = APIRouter(prefix="/api/heatmap", tags=["heatmap"])

# Initial selection of the venue heatmap view: Friday night
DEFAULT_DAY = Weekday.FRIDAY.value
DEFAULT_HOUR = 22


def _point_responses(points: list[HeatmapPoint]) -> list[HeatmapPointResponse]:
    return [
        HeatmapPointResponse(latitude=p.latitude, longitude=p.longitude, weight=p.weight)
        for p in points
    ]


@router.get("/live", response_model=HeatmapResponse)
async def get_live_heatmap(db: AsyncSession = Depends(get_db)) -> HeatmapResponse:
    """Venue busyness right now plus live check-ins."""
    now = local_now()
    points = await heatmap_service.live_heatmap(db, now)
    return HeatmapResponse(
        mode="live",
        day=Weekday.from_date(now.date()).value,
        hour=now.hour,
        generated_at=now,
        point_count=len(points),
        points=_point_responses(points),
    )


@router.get("/prediction", response_model=HeatmapResponse)
async def get_prediction_heatmap(db: AsyncSession = Depends(get_db)) -> HeatmapResponse:
    """Intensity of upcoming approved events."""
    now = local_now()
    points = await heatmap_service.prediction_heatmap(db, now)
    return HeatmapResponse(
        mode="prediction",
        generated_at=now,
        point_count=len(points),
        points=_point_responses(points),
    )


@router.get("/venues", response_model=HeatmapResponse)
async def get_venue_heatmap(
    day: Annotated[str, Query(description="Weekday name")] = DEFAULT_DAY,
    hour: Annotated[int, Query(description="Hour 0-23")] = DEFAULT_HOUR,
    db: AsyncSession = Depends(get_db),
) -> HeatmapResponse:
    """Venue busyness at a selected weekday and hour."""
    weekday = Weekday.parse(day)
    points = await heatmap_service.venue_heatmap(db, weekday, hour)
    return HeatmapResponse(
        mode="venues",
        day=weekday.value,
        hour=hour,
        generated_at=local_now(),
        point_count=len(points),
        points=_point_responses(points),
    )


@router.get("/density", response_model=DensityResponse)
async def get_density_grid(
    day: Annotated[str, Query(description="Weekday name")] = DEFAULT_DAY,
    hour: Annotated[int, Query(description="Hour 0-23")] = DEFAULT_HOUR,
    cell_size_km: Annotated[
        float, Query(alias="cellSizeKm", gt=0, le=50, description="Grid cell size in km")
    ] = 0.5,
    db: AsyncSession = Depends(get_db),
) -> DensityResponse:
    """Venue busyness binned into a grid for map layers without heat support."""
    weekday = Weekday.parse(day)
    cells = await heatmap_service.venue_density(db, weekday, hour, cell_size_km)
    return DensityResponse(
        day=weekday.value,
        hour=hour,
        cell_size_km=cell_size_km,
        cell_count=len(cells),
        cells=[
            DensityCellResponse(
                south=c.south,
                west=c.west,
                north=c.north,
                east=c.east,
                weight=c.weight,
                point_count=c.point_count,
                color=c.color,
            )
            for c in cells
        ],
    )
