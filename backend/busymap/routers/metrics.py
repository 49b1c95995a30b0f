"""Prometheus metrics endpoint."""

from datetime import UTC, datetime, timedelta

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Gauge, generate_latest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from busymap.config import get_settings
from busymap.database import get_db
from busymap.models import Checkin, Event, EventAttendee, Place
from busymap.popularity.domain import EventStatus

router = APIRouter(tags=["metrics"])


async def collect_metrics(db: AsyncSession) -> bytes:
    """Collect all metrics and return Prometheus format."""
    registry = CollectorRegistry()
    settings = get_settings()

    places_total = Gauge(
        "busymap_places_total",
        "Places per category and popular-times source",
        ["category", "data_source"],
        registry=registry,
    )
    places_without_popular_times = Gauge(
        "busymap_places_without_popular_times",
        "Places that have no popular times yet",
        registry=registry,
    )
    live_checkins = Gauge(
        "busymap_live_checkins",
        "Check-ins inside the live heatmap window",
        registry=registry,
    )
    upcoming_events = Gauge(
        "busymap_upcoming_events",
        "Approved active events that have not started",
        registry=registry,
    )
    db_rows = Gauge(
        "busymap_db_rows_total",
        "Database row counts",
        ["table"],
        registry=registry,
    )

    now = datetime.now(UTC)

    # Places by category and source
    grouped = await db.execute(
        select(Place.category, Place.data_source, func.count()).group_by(
            Place.category, Place.data_source
        )
    )
    for category, data_source, count in grouped.all():
        source_label = data_source.value if data_source else "none"
        places_total.labels(category=category or "other", data_source=source_label).set(count)

    missing = await db.execute(
        select(func.count()).select_from(Place).where(Place.popular_times.is_(None))
    )
    places_without_popular_times.set(missing.scalar() or 0)

    cutoff = now - timedelta(minutes=settings.live_window_minutes)
    live = await db.execute(
        select(func.count()).select_from(Checkin).where(Checkin.created_at > cutoff)
    )
    live_checkins.set(live.scalar() or 0)

    upcoming = await db.execute(
        select(func.count())
        .select_from(Event)
        .where(
            Event.status == EventStatus.APPROVED,
            Event.is_active.is_(True),
            Event.start_at > now,
        )
    )
    upcoming_events.set(upcoming.scalar() or 0)

    # Database row counts
    for table_name, model in [
        ("places", Place),
        ("events", Event),
        ("event_attendees", EventAttendee),
        ("checkins", Checkin),
    ]:
        count_result = await db.execute(select(func.count()).select_from(model))
        db_rows.labels(table=table_name).set(count_result.scalar() or 0)

    return generate_latest(registry)


@router.get("/metrics", response_class=PlainTextResponse)
async def prometheus_metrics(db: AsyncSession = Depends(get_db)) -> PlainTextResponse:
    """Prometheus metrics endpoint."""
    metrics_data = await collect_metrics(db)
    return PlainTextResponse(content=metrics_data, media_type=CONTENT_TYPE_LATEST)
