"""FastAPI app: contest snapshot, per-user stats and visit counter endpoints."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.errors import PyMongoError

from analytics.division_stats import build_division_stats
from analytics.user_stats import build_user_stats
from config import settings
from db import dal
from db.client import ensure_indexes
from integrations.codeforces import CodeforcesAPIError
from utils.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


def _start_background_scheduler():
    """Run the refresh job inside the web process (single-process deployments).
    Returns the scheduler, or None when disabled or it failed to start."""
    if settings.DISABLE_SCHEDULER:
        logger.info("Background scheduler disabled via DISABLE_SCHEDULER env var")
        return None
    try:
        from apscheduler.schedulers.background import BackgroundScheduler
        from jobs.scheduler import add_refresh_jobs

        scheduler = BackgroundScheduler()
        add_refresh_jobs(scheduler)
        scheduler.start()
        logger.info("Background scheduler started")
        return scheduler
    except Exception as e:
        logger.warning("Background scheduler failed to start: %s", e)
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        ensure_indexes()
    except PyMongoError as e:
        logger.warning("Index ensure failed (MongoDB may be down): %s", e)
    scheduler = _start_background_scheduler()
    yield
    if scheduler is not None:
        scheduler.shutdown(wait=False)


app = FastAPI(title="CF Stats", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_credentials=True,
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.get("/health", response_class=PlainTextResponse)
def health():
    return "OK"


# --- Contest snapshot. Unknown divisions simply have no documents. ---
@app.get("/api/contests/{division}")
def api_contests(division: str):
    try:
        return dal.get_contests(division)
    except PyMongoError as e:
        logger.error("Contests query for %s failed: %s", division, e)
        return _error(500, "Failed to fetch contests")


@app.get("/api/problems/rating/{division}")
def api_problems_by_rating(division: str):
    try:
        return dal.get_problems_by_rating(division)
    except PyMongoError as e:
        logger.error("Problems-by-rating query for %s failed: %s", division, e)
        return _error(500, "Failed to fetch problems by rating")


@app.get("/api/problems/topics/{division}")
def api_problems_by_topic(division: str):
    try:
        return dal.get_problems_by_topic(division)
    except PyMongoError as e:
        logger.error("Problems-by-topic query for %s failed: %s", division, e)
        return _error(500, "Failed to fetch problems by topic")


@app.get("/api/stats/{division}")
def api_division_stats(division: str):
    try:
        return build_division_stats(division)
    except PyMongoError as e:
        logger.error("Statistics query for %s failed: %s", division, e)
        return _error(500, "Failed to fetch division statistics")


# --- Visit counter ---
@app.post("/api/visits/increment")
def api_visits_increment():
    try:
        return {"count": dal.increment_visits()}
    except PyMongoError as e:
        logger.error("Error updating visit counter: %s", e)
        return _error(500, "Failed to update visit counter")


@app.get("/api/visits")
def api_visits():
    try:
        return {"count": dal.get_visits()}
    except PyMongoError as e:
        logger.error("Error fetching visit counter: %s", e)
        return _error(500, "Failed to fetch visit counter")


# --- Per-user statistics (live from Codeforces, not stored) ---
@app.get("/api/users/{handle}/stats")
def api_user_stats(
    handle: str,
    from_ms: int | None = Query(None, alias="from"),
    to_ms: int | None = Query(None, alias="to"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    sort: str = Query("time", pattern="^(time|rating)$"),
):
    try:
        return build_user_stats(handle, from_ms=from_ms, to_ms=to_ms, order=order, sort=sort)
    except CodeforcesAPIError as e:
        logger.warning("User stats for %s failed: %s", handle, e)
        return _error(502, f"Codeforces request failed: {e.message}")
