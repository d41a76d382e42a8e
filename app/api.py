"""HTTP API for the lawn season assistant."""

import datetime as dt
import hmac
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests
from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel, Field

from .activity_calendar import build_day_index, filter_activities, month_grid
from .advisory_engine import evaluate_advisory
from .config import settings
from .dashboard import build_dashboard
from .data_sources import build_data_source
from .domain import (
    ActivityType,
    AdvisoryResult,
    DashboardPayload,
    GrowthPhaseInfo,
    LoggedActivity,
    MonthGrid,
    NextStep,
    TaskStatus,
    WeatherSnapshot,
)
from .growth_phase import classify_growth_phase, quick_tip
from .season_calendar import (
    SEASON_TASKS,
    completed_count,
    season_schedule,
    select_next_step,
    toggle_completion,
)
from .weather_manager import get_weather, peek_weather
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="app/api")

# Optional Redis client for API key checks; fallback to a static key
try:
    import redis  # type: ignore
except ImportError:  # pragma: no cover - exercised implicitly
    redis = None

_redis_client = None
if settings.api_key_redis_url and redis:
    try:
        _redis_client = redis.Redis.from_url(settings.api_key_redis_url)
        logger.info("API key checks will use Redis backend",
                    extra={"redis_url": mask_url(settings.api_key_redis_url)})
    except Exception as exc:  # pragma: no cover - safety net
        logger.warning("Failed to connect to Redis for API key checks; falling back to static key",
                       extra={"error": str(exc)})


def require_api_key(x_api_key: str | None = Header(default=None)):
    """
    Validate X-API-Key header against Redis (if configured) or the static api_key setting.
    """
    # If no key configured anywhere, allow requests (dev/default mode).
    if not settings.api_key and not _redis_client:
        logger.debug("No API key configured; allowing all requests")
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if _redis_client:
        try:
            if _redis_client.sismember(settings.api_key_redis_set, x_api_key):
                return
        except Exception as e:  # pragma: no cover - defensive
            logger.warning("Redis API key lookup error; falling back to static key",
                           extra={"error": str(e)})

    if settings.api_key and hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])
DATA_SOURCE = build_data_source(settings)


class GrowthPhaseResponse(BaseModel):
    """Growth phase for a day plus the month's tip."""
    date: dt.date
    growth_phase: GrowthPhaseInfo
    quick_tip: str


class ScheduleResponse(BaseModel):
    """Season task statuses and the current next step."""
    date: dt.date
    next_step: NextStep
    tasks: List[TaskStatus]
    completed_count: int


class CompletionToggleRequest(BaseModel):
    """Flip one task's completion within the caller's current set."""
    task_key: str = Field(min_length=1)
    completed_task_keys: List[str] = Field(default_factory=list)
    date: Optional[dt.date] = None


class CompletionToggleResponse(ScheduleResponse):
    """Schedule recomputed with the new completion set, which the caller persists."""
    completed_task_keys: List[str]


class WeatherResponse(BaseModel):
    """Snapshot for a location, when it was fetched, and its advisories."""
    weather: WeatherSnapshot
    fetched_at: dt.datetime
    advisory: AdvisoryResult


class CalendarRequest(BaseModel):
    """Activity history to lay out as a month view."""
    year: int
    month: int = Field(ge=1, le=12)
    activities: List[LoggedActivity] = Field(default_factory=list)
    category: Optional[ActivityType] = None


class DashboardRequest(BaseModel):
    """Caller-owned state needed to build the dashboard."""
    date: Optional[dt.date] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    activities: List[LoggedActivity] = Field(default_factory=list)
    completed_task_keys: List[str] = Field(default_factory=list)


def _resolve_today(day: dt.date | None) -> dt.date:
    """Use the given day, or today in the configured timezone."""
    if day is not None:
        return day
    try:
        tz = ZoneInfo(settings.timezone)
    except ZoneInfoNotFoundError:
        raise HTTPException(status_code=400, detail=f"Invalid timezone: {settings.timezone}")
    return dt.datetime.now(tz).date()


def _resolve_location(latitude: float | None, longitude: float | None) -> tuple[float, float]:
    """Fall back to the configured default coordinates."""
    lat = settings.default_latitude if latitude is None else latitude
    lon = settings.default_longitude if longitude is None else longitude
    return lat, lon


@router.get("/growth-phase", response_model=GrowthPhaseResponse)
def growth_phase(day: Optional[dt.date] = None):
    """Return the growth phase and tip for a day."""
    today = _resolve_today(day)
    return GrowthPhaseResponse(date=today, growth_phase=classify_growth_phase(today), quick_tip=quick_tip(today))


@router.get("/next-step", response_model=NextStep)
def next_step(day: Optional[dt.date] = None):
    """Return the first active, urgent or upcoming task."""
    return select_next_step(SEASON_TASKS, _resolve_today(day))


@router.get("/schedule", response_model=ScheduleResponse)
def schedule(day: Optional[dt.date] = None, completed: List[str] = Query(default=[])):
    """Return the season's task statuses given the completed task keys."""
    today = _resolve_today(day)
    done = frozenset(completed)
    return ScheduleResponse(
        date=today,
        next_step=select_next_step(SEASON_TASKS, today),
        tasks=season_schedule(SEASON_TASKS, today, done),
        completed_count=completed_count(SEASON_TASKS, done),
    )


@router.post("/schedule/toggle", response_model=CompletionToggleResponse)
def toggle_task_completion(req: CompletionToggleRequest):
    """Mark a task done (or undo it) and return the recomputed schedule."""
    if req.task_key not in {task.key for task in SEASON_TASKS}:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown task '{req.task_key}'")
    today = _resolve_today(req.date)
    done = toggle_completion(frozenset(req.completed_task_keys), req.task_key)
    return CompletionToggleResponse(
        date=today,
        next_step=select_next_step(SEASON_TASKS, today),
        tasks=season_schedule(SEASON_TASKS, today, done),
        completed_count=completed_count(SEASON_TASKS, done),
        completed_task_keys=sorted(done),
    )


@router.post("/advisory", response_model=AdvisoryResult)
def advisory(weather: WeatherSnapshot):
    """Evaluate mow / water / fertilize advisories for a caller-supplied snapshot."""
    return evaluate_advisory(weather)


@router.get("/weather", response_model=WeatherResponse)
def weather(
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    cached_only: bool = False,
):
    """Return the (cached) weather snapshot for a location with its advisories.

    With `cached_only` the provider is never called; a location with no live
    cache entry yields 404.
    """
    lat, lon = _resolve_location(latitude, longitude)
    if cached_only:
        cached = peek_weather(lat, lon)
        if cached is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No cached weather for location")
    else:
        try:
            cached = get_weather(lat, lon, DATA_SOURCE)
        except requests.RequestException as exc:
            logger.warning("Weather fetch failed", extra={"error": str(exc)})
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Weather fetch failed")
    return WeatherResponse(weather=cached.data, fetched_at=cached.fetched_at, advisory=evaluate_advisory(cached.data))


@router.post("/calendar", response_model=MonthGrid)
def activity_calendar(req: CalendarRequest):
    """Lay out logged activities as a month grid with capped badges."""
    activities = filter_activities(req.activities, req.category)
    index = build_day_index(activities)
    return month_grid(index, req.year, req.month, badge_limit=settings.badge_limit)


@router.post("/dashboard", response_model=DashboardPayload)
def dashboard(req: DashboardRequest):
    """Build the home-screen payload; weather failures degrade to no advisories."""
    today = _resolve_today(req.date)
    lat, lon = _resolve_location(req.latitude, req.longitude)

    snapshot: WeatherSnapshot | None = None
    try:
        snapshot = get_weather(lat, lon, DATA_SOURCE).data
    except requests.RequestException as exc:
        logger.warning("Weather unavailable for dashboard; continuing without it", extra={"error": str(exc)})

    return build_dashboard(
        today,
        weather=snapshot,
        activities=req.activities,
        completed=frozenset(req.completed_task_keys),
    )
