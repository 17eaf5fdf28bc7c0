"""Process-wide logging setup for the API and the scheduler process."""
import logging
import sys

from config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Chatty at INFO: every job run, every connection-pool event, every HTTP request.
NOISY_LOGGERS = ("apscheduler.executors.default", "pymongo", "urllib3")


def setup_logging(level: str | None = None) -> None:
    """Log to stdout at `level` (LOG_LEVEL by default).

    Third-party loggers in NOISY_LOGGERS are held at WARNING unless the
    process itself logs at DEBUG.
    """
    resolved = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", stream=sys.stdout, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if resolved <= logging.DEBUG else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
