"""APScheduler wiring for the daily contest refresh."""
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.cron import CronTrigger

from config import settings
from jobs.refresh_contests import is_refresh_running, run_refresh_cycle
from utils.logging import get_logger

logger = get_logger(__name__)

REFRESH_JOB_ID = "refresh_contests"


def job_refresh_contests() -> None:
    if is_refresh_running():
        logger.info("Contest refresh already running; skipping this trigger")
        return
    try:
        run_refresh_cycle()
    except Exception as e:
        logger.exception("Contest refresh job failed: %s", e)


def add_refresh_jobs(scheduler: BaseScheduler) -> None:
    scheduler.add_job(
        job_refresh_contests,
        CronTrigger(hour=settings.REFRESH_HOUR, minute=settings.REFRESH_MINUTE),
        id=REFRESH_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    if settings.REFRESH_ON_STARTUP:
        # no trigger: runs once as soon as the scheduler starts
        scheduler.add_job(job_refresh_contests, id=f"{REFRESH_JOB_ID}_startup", misfire_grace_time=None)
    logger.info(
        "Contest refresh scheduled daily at %02d:%02d%s",
        settings.REFRESH_HOUR, settings.REFRESH_MINUTE,
        " (plus one run now)" if settings.REFRESH_ON_STARTUP else "",
    )
