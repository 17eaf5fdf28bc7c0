"""Codeforces official API client. Rate limit: 1 request per 2 seconds."""
import threading
import time
from typing import Any

import requests

from config import settings
from utils.logging import get_logger

logger = get_logger(__name__)

_last_request_time = 0.0
_rate_lock = threading.Lock()

CALL_LIMIT_COMMENT = "call limit exceeded"


class CodeforcesAPIError(RuntimeError):
    """Raised when a Codeforces call fails after retries or returns status != OK."""

    def __init__(self, method: str, message: str):
        super().__init__(f"{method}: {message}")
        self.method = method
        self.message = message


def _rate_limit() -> None:
    global _last_request_time
    with _rate_lock:
        now = time.time()
        elapsed = now - _last_request_time
        if elapsed < settings.CF_MIN_INTERVAL:
            time.sleep(settings.CF_MIN_INTERVAL - elapsed)
        _last_request_time = time.time()


def _get(method: str, params: dict[str, str | int] | None = None) -> Any:
    """GET an API method and unwrap the {status, result} envelope.

    Network errors, 5xx responses, undecodable bodies and "Call limit exceeded"
    are retried with a fixed delay; any other non-OK status fails at once.
    """
    url = f"{settings.CF_API_BASE}/{method}"
    attempts = settings.CF_MAX_RETRIES + 1
    last_error = "no attempt made"
    last_exc: Exception | None = None
    for attempt in range(1, attempts + 1):
        _rate_limit()
        try:
            r = requests.get(url, params=params or {}, timeout=settings.CF_TIMEOUT)
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            last_error = str(e)
            last_exc = e
            logger.warning("Codeforces API %s attempt %d/%d failed: %s", method, attempt, attempts, e)
        else:
            status = data.get("status") if isinstance(data, dict) else None
            if status == "OK":
                return data.get("result")
            comment = (data.get("comment") if isinstance(data, dict) else None) or f"HTTP {r.status_code}"
            last_error = comment
            if CALL_LIMIT_COMMENT not in comment.lower() and r.status_code < 500:
                logger.warning("Codeforces API %s rejected: %s", method, comment)
                raise CodeforcesAPIError(method, comment)
            logger.warning("Codeforces API %s attempt %d/%d failed: %s", method, attempt, attempts, comment)
        if attempt < attempts:
            time.sleep(settings.CF_RETRY_DELAY)
    raise CodeforcesAPIError(method, f"gave up after {attempts} attempts: {last_error}") from last_exc


class CodeforcesAPI:
    @staticmethod
    def contest_list(gym: bool = False) -> list[dict]:
        return _get("contest.list", {"gym": "true" if gym else "false"})

    @staticmethod
    def contest_standings(contest_id: int, from_index: int = 1, count: int = 1) -> dict:
        """Any standings page carries the full problem list, so one row is enough."""
        return _get("contest.standings", {"contestId": contest_id, "from": from_index, "count": count})

    @staticmethod
    def user_info(handles: str | list[str]) -> list[dict]:
        if isinstance(handles, list):
            handles = ";".join(handles)
        return _get("user.info", {"handles": handles})

    @staticmethod
    def user_status(handle: str, from_index: int | None = None, count: int | None = None) -> list[dict]:
        params: dict[str, str | int] = {"handle": handle}
        if from_index is not None:
            params["from"] = from_index
        if count is not None:
            params["count"] = count
        return _get("user.status", params)
