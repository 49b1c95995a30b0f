"""Schemas for heatmap layers."""

from datetime import datetime
from typing import Literal

from busymap.schemas.common import CamelModel

HeatmapMode = Literal["live", "prediction", "venues"]


class HeatmapPointResponse(CamelModel):
    """A weighted map point."""

    latitude: float
    longitude: float
    weight: float


class HeatmapResponse(CamelModel):
    """Heatmap layer for one render pass."""

    mode: HeatmapMode
    day: str | None = None
    hour: int | None = None
    generated_at: datetime
    point_count: int
    points: list[HeatmapPointResponse]


class DensityCellResponse(CamelModel):
    """A single cell in the density grid."""

    south: float
    west: float
    north: float
    east: float
    weight: float
    point_count: int
    color: str


class DensityResponse(CamelModel):
    """Density grid built from venue busyness."""

    day: str
    hour: int
    cell_size_km: float
    cell_count: int
    cells: list[DensityCellResponse]
