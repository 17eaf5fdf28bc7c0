"""Group contest problems into per-division rating and topic buckets for one refresh cycle."""
import threading
from typing import Any

from analytics.divisions import DIVISIONS


def problem_id(contest_id: Any, index: Any) -> str:
    return f"{contest_id}-{index}"


def contest_doc(contest: dict, division: str, problems: list[dict]) -> dict:
    return {
        "id": contest["id"],
        "name": contest.get("name", ""),
        "division": division,
        "startTimeSeconds": contest.get("startTimeSeconds"),
        "problems": [
            {
                "id": problem_id(contest["id"], p.get("index")),
                "name": p.get("name", ""),
                "rating": p.get("rating"),
                "tags": p.get("tags") or [],
            }
            for p in problems
        ],
    }


class SnapshotBuilder:
    """Thread-safe accumulator for contests and their rating/topic buckets.

    Buckets behave like ordered sets keyed by problem id: adding a problem that
    is already in a bucket replaces the earlier entry in place.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._contests: list[dict] = []
        # (division, rating) -> {problem id: entry}
        self._by_rating: dict[tuple[str, int], dict[str, dict]] = {}
        # (division, topic) -> {problem id: entry}
        self._by_topic: dict[tuple[str, str], dict[str, dict]] = {}

    def add_contest(self, contest: dict, division: str, problems: list[dict]) -> None:
        doc = contest_doc(contest, division, problems)
        rating_entries: list[tuple[tuple[str, int], dict]] = []
        topic_entries: list[tuple[tuple[str, str], dict]] = []
        for p in problems:
            pid = problem_id(contest["id"], p.get("index"))
            tags = p.get("tags") or []
            rating = p.get("rating")
            if rating:
                rating_entries.append(((division, int(rating)), {
                    "id": pid,
                    "name": p.get("name", ""),
                    "contestId": contest["id"],
                    "contestName": contest.get("name", ""),
                    "tags": list(tags),
                }))
            for tag in tags:
                topic_entries.append(((division, tag), {
                    "id": pid,
                    "name": p.get("name", ""),
                    "rating": rating,
                    "contestId": contest["id"],
                    "contestName": contest.get("name", ""),
                }))
        with self._lock:
            self._contests.append(doc)
            for key, entry in rating_entries:
                self._by_rating.setdefault(key, {})[entry["id"]] = entry
            for key, entry in topic_entries:
                self._by_topic.setdefault(key, {})[entry["id"]] = entry

    def contests(self) -> list[dict]:
        order = {division: i for i, division in enumerate(DIVISIONS)}
        with self._lock:
            return sorted(
                self._contests,
                key=lambda c: (order.get(c["division"], len(order)), -(c.get("startTimeSeconds") or 0)),
            )

    def rating_buckets(self) -> list[dict]:
        with self._lock:
            return [
                {"division": division, "rating": rating, "problems": list(entries.values())}
                for (division, rating), entries in sorted(self._by_rating.items(), key=lambda kv: kv[0])
            ]

    def topic_buckets(self) -> list[dict]:
        with self._lock:
            return [
                {"division": division, "topic": topic, "problems": list(entries.values())}
                for (division, topic), entries in sorted(self._by_topic.items(), key=lambda kv: kv[0])
            ]
