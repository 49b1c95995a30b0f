"""API routers."""

from busymap.routers.checkins import router as checkins_router
from busymap.routers.health import router as health_router
from busymap.routers.heatmap import router as heatmap_router
from busymap.routers.metrics import router as metrics_router
from busymap.routers.places import router as places_router

__all__ = [
    "checkins_router",
    "health_router",
    "heatmap_router",
    "metrics_router",
    "places_router",
]
