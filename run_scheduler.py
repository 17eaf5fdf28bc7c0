"""Run the daily contest refresh in its own process. Usage: python run_scheduler.py

Start the API with DISABLE_SCHEDULER=true when this process owns the job.
"""
from apscheduler.schedulers.blocking import BlockingScheduler

from config import settings
from jobs.scheduler import add_refresh_jobs
from utils.logging import get_logger, setup_logging

setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


def main():
    scheduler = BlockingScheduler()
    add_refresh_jobs(scheduler)
    logger.info("Scheduler started")
    scheduler.start()


if __name__ == "__main__":
    main()
