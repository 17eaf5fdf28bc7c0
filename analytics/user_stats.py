"""Per-user solve statistics from a Codeforces submission history."""
from dataclasses import dataclass, field
from typing import Any, Iterable

from analytics.problem_groups import problem_id
from integrations.codeforces import CodeforcesAPI

ACCEPTED = "OK"


@dataclass
class UserSolveStats:
    solved_by_rating: dict[str, list[dict]] = field(default_factory=dict)
    solved_by_topic: dict[str, list[dict]] = field(default_factory=dict)
    unsolved: list[dict] = field(default_factory=list)


def _submission_problem_id(submission: dict) -> str:
    problem = submission.get("problem") or {}
    return problem_id(problem.get("contestId"), problem.get("index"))


def _problem_entry(submission: dict, pid: str, time_ms: int) -> dict:
    problem = submission.get("problem") or {}
    return {
        "id": pid,
        "name": problem.get("name", ""),
        "time": time_ms,
        "rating": problem.get("rating"),
        "tags": list(problem.get("tags") or []),
    }


def classify_submissions(submissions: Iterable[dict]) -> UserSolveStats:
    """Split a submission history into solved-by-rating, solved-by-topic and unsolved views.

    A problem is solved if any of its submissions was accepted. Solved problems
    with a rating are listed once per rating and once per tag, using their most
    recent accepted submission. Problems never accepted are unsolved: they keep
    the snapshot of their first failed submission plus a count of failed attempts.
    """
    submissions = sorted(submissions, key=lambda s: s.get("creationTimeSeconds") or 0)
    solved_ids = {_submission_problem_id(s) for s in submissions if s.get("verdict") == ACCEPTED}

    latest_solve: dict[str, dict] = {}
    unsolved: dict[str, dict] = {}
    for s in submissions:
        pid = _submission_problem_id(s)
        time_ms = int(s.get("creationTimeSeconds") or 0) * 1000
        if s.get("verdict") == ACCEPTED:
            if (s.get("problem") or {}).get("rating"):
                # ascending order: each accepted submission is the newest seen so far
                latest_solve[pid] = _problem_entry(s, pid, time_ms)
        elif pid not in solved_ids:
            if pid in unsolved:
                unsolved[pid]["attempts"] += 1
            else:
                unsolved[pid] = {**_problem_entry(s, pid, time_ms), "attempts": 1}

    by_rating: dict[str, list[dict]] = {}
    by_topic: dict[str, list[dict]] = {}
    for entry in sorted(latest_solve.values(), key=lambda e: e["time"]):
        by_rating.setdefault(str(entry["rating"]), []).append(entry)
        for tag in dict.fromkeys(entry["tags"]):
            by_topic.setdefault(tag, []).append(entry)

    return UserSolveStats(
        solved_by_rating=by_rating,
        solved_by_topic=by_topic,
        unsolved=list(unsolved.values()),
    )


def rating_histogram(solved_by_rating: dict[str, list[dict]]) -> list[dict]:
    return [
        {"rating": int(rating), "count": len(problems)}
        for rating, problems in sorted(solved_by_rating.items(), key=lambda kv: int(kv[0]))
    ]


def topic_distribution(solved_by_topic: dict[str, list[dict]]) -> list[dict]:
    counts = [{"topic": topic, "count": len(problems)} for topic, problems in solved_by_topic.items()]
    return sorted(counts, key=lambda item: (-item["count"], item["topic"]))


def filter_by_time(problems: list[dict], from_ms: int | None = None, to_ms: int | None = None) -> list[dict]:
    """Keep problems with from_ms <= time <= to_ms; a missing bound is open."""
    if from_ms is None and to_ms is None:
        return problems
    return [
        p for p in problems
        if (from_ms is None or p["time"] >= from_ms) and (to_ms is None or p["time"] <= to_ms)
    ]


def sort_by_time(problems: list[dict], order: str = "desc") -> list[dict]:
    return sorted(problems, key=lambda p: p["time"], reverse=order != "asc")


def sort_by_rating(problems: list[dict], order: str = "desc") -> list[dict]:
    return sorted(problems, key=lambda p: p.get("rating") or 0, reverse=order != "asc")


def build_user_stats(
    handle: str,
    api: Any = CodeforcesAPI,
    from_ms: int | None = None,
    to_ms: int | None = None,
    order: str = "desc",
    sort: str = "time",
) -> dict[str, Any]:
    """Fetch a user's profile and submissions and return the dashboard payload.

    `sort` orders each solved bucket by solve time or by problem rating.
    Raises CodeforcesAPIError when either upstream call fails.
    """
    sort_problems = sort_by_rating if sort == "rating" else sort_by_time
    info = api.user_info(handle)
    stats = classify_submissions(api.user_status(handle))

    solved_by_rating = {
        rating: sort_problems(filter_by_time(problems, from_ms, to_ms), order)
        for rating, problems in stats.solved_by_rating.items()
    }
    solved_by_topic = {
        tag: sort_problems(filter_by_time(problems, from_ms, to_ms), order)
        for tag, problems in stats.solved_by_topic.items()
    }
    total_solved = len({p["id"] for problems in stats.solved_by_rating.values() for p in problems})
    return {
        "handle": handle,
        "user": info[0] if info else None,
        "solvedByRating": solved_by_rating,
        "solvedByTopic": solved_by_topic,
        "unsolved": stats.unsolved,
        "ratingHistogram": rating_histogram(solved_by_rating),
        "topicDistribution": topic_distribution(solved_by_topic),
        "totalSolved": total_solved,
    }
