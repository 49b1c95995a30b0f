"""Bin heatmap points into a lat/lng grid for map layers without heat support."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from busymap.popularity.errors import InvalidInputError
from busymap.popularity.heatmap import HeatmapPoint
from busymap.popularity.resolver import color

# Constants for coordinate conversion
KM_PER_DEGREE_LAT = 111.0
MAX_GRID_CELLS = 50000


@dataclass(frozen=True)
class DensityCell:
    south: float
    west: float
    north: float
    east: float
    weight: float
    point_count: int

    @property
    def color(self) -> str:
        return color(self.weight * 100)


def density_grid(points: Iterable[HeatmapPoint], cell_size_km: float = 0.5) -> list[DensityCell]:
    """Sum point weights per grid cell. Cell weight is capped at 1.0."""
    if cell_size_km <= 0:
        raise InvalidInputError(f"Cell size must be positive, got {cell_size_km}")

    points = list(points)
    if not points:
        return []

    cell_size_lat = cell_size_km / KM_PER_DEGREE_LAT

    lats = [p.latitude for p in points]
    lngs = [p.longitude for p in points]
    min_lat, max_lat = min(lats), max(lats)
    min_lng, max_lng = min(lngs), max(lngs)

    center_lat = (min_lat + max_lat) / 2
    km_per_degree_lng = KM_PER_DEGREE_LAT * math.cos(center_lat * math.pi / 180)
    cell_size_lng = cell_size_km / km_per_degree_lng

    # Align to grid
    grid_min_lat = math.floor(min_lat / cell_size_lat) * cell_size_lat
    grid_max_lat = math.ceil(max_lat / cell_size_lat) * cell_size_lat
    grid_min_lng = math.floor(min_lng / cell_size_lng) * cell_size_lng
    grid_max_lng = math.ceil(max_lng / cell_size_lng) * cell_size_lng

    num_rows = max(math.ceil((grid_max_lat - grid_min_lat) / cell_size_lat), 1)
    num_cols = max(math.ceil((grid_max_lng - grid_min_lng) / cell_size_lng), 1)
    if num_rows * num_cols > MAX_GRID_CELLS:
        raise InvalidInputError(
            f"Grid too large ({num_rows}x{num_cols}). Increase cell size or narrow the area."
        )

    weights: dict[tuple[int, int], float] = {}
    counts: dict[tuple[int, int], int] = {}
    for point in points:
        row = int((point.latitude - grid_min_lat) / cell_size_lat)
        col = int((point.longitude - grid_min_lng) / cell_size_lng)
        key = (row, col)
        weights[key] = weights.get(key, 0.0) + point.weight
        counts[key] = counts.get(key, 0) + 1

    cells = []
    for (row, col), weight in sorted(weights.items()):
        south = grid_min_lat + row * cell_size_lat
        west = grid_min_lng + col * cell_size_lng
        cells.append(
            DensityCell(
                south=south,
                west=west,
                north=south + cell_size_lat,
                east=west + cell_size_lng,
                weight=min(weight, 1.0),
                point_count=counts[(row, col)],
            )
        )
    return cells
