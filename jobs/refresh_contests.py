"""Daily refresh: fetch Codeforces contests, group their problems, replace the stored snapshot."""
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from analytics.divisions import DIVISIONS, group_contests_by_division
from analytics.problem_groups import SnapshotBuilder
from config import settings
from db import dal
from integrations.codeforces import CodeforcesAPI, CodeforcesAPIError
from utils.logging import get_logger

logger = get_logger(__name__)

# Only one cycle may run per process; an overlapping trigger is skipped.
_refresh_lock = threading.Lock()


@dataclass
class RefreshResult:
    skipped: bool = False
    contests: int = 0
    rating_buckets: int = 0
    topic_buckets: int = 0
    failed_contests: list[int] = field(default_factory=list)


def is_refresh_running() -> bool:
    return _refresh_lock.locked()


def _fetch_problems(api: Any, contest: dict) -> list[dict] | None:
    """Problem list of one contest, or None if the contest should be skipped."""
    try:
        standings = api.contest_standings(contest["id"], from_index=1, count=1)
    except CodeforcesAPIError as e:
        logger.warning("Skipping contest %s (%s): %s", contest["id"], contest.get("name"), e)
        return None
    problems = (standings or {}).get("problems")
    if problems is None:
        logger.warning("Skipping contest %s (%s): standings carry no problem list", contest["id"], contest.get("name"))
        return None
    # an empty list is a valid contest with no problems yet
    return problems


def run_refresh_cycle(
    api: Any = CodeforcesAPI,
    store: Any = dal,
    limit: int | None = None,
    workers: int | None = None,
) -> RefreshResult:
    """Run one fetch -> aggregate -> store cycle.

    The stored snapshot is only replaced once every contest has been
    processed; if the contest list cannot be fetched the cycle is abandoned
    and the previous snapshot stays in place.
    """
    if not _refresh_lock.acquire(blocking=False):
        logger.warning("Refresh already in progress; skipping this trigger")
        return RefreshResult(skipped=True)
    try:
        return _run_cycle(api, store, limit or settings.CONTESTS_PER_DIVISION, workers or settings.REFRESH_WORKERS)
    finally:
        _refresh_lock.release()


def _run_cycle(api: Any, store: Any, limit: int, workers: int) -> RefreshResult:
    logger.info("Starting contest data refresh")
    try:
        all_contests = api.contest_list(gym=False)
    except CodeforcesAPIError:
        logger.exception("Contest list fetch failed; refresh abandoned")
        raise

    grouped = group_contests_by_division(all_contests, limit=limit)
    for division in DIVISIONS:
        logger.info("Retained %d contests for %s", len(grouped[division]), division)

    retained = [(division, contest) for division in DIVISIONS for contest in grouped[division]]
    builder = SnapshotBuilder()
    result = RefreshResult()
    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        futures = [pool.submit(_fetch_problems, api, contest) for _, contest in retained]
        # merged in submission order so the snapshot does not depend on fetch timing
        for (division, contest), future in zip(retained, futures):
            problems = future.result()
            if problems is None:
                result.failed_contests.append(contest["id"])
                continue
            builder.add_contest(contest, division, problems)

    contests = builder.contests()
    rating_buckets = builder.rating_buckets()
    topic_buckets = builder.topic_buckets()
    if retained and not contests:
        logger.error("No contest standings could be fetched; keeping the previous snapshot")
        return result
    store.replace_snapshot(contests, rating_buckets, topic_buckets)

    result.contests = len(contests)
    result.rating_buckets = len(rating_buckets)
    result.topic_buckets = len(topic_buckets)
    logger.info(
        "Contest data refresh completed: %d contests stored, %d skipped",
        result.contests, len(result.failed_contests),
    )
    return result
