"""Classify Codeforces contests into divisions by name and keep the most recent per division."""
from typing import Iterable

DIVISIONS = ("div1", "div2", "div3", "div4")


def classify_division(name: str) -> str | None:
    """Return div1..div4 for a contest name, or None when the contest is not tracked.

    Matching is a case-insensitive substring test, first match wins. Combined
    rounds ("Div. 1 + Div. 2") match neither of the first two rules and never
    mention Div. 3/4, so they are dropped.
    """
    lowered = (name or "").lower()
    has_div1 = "div. 1" in lowered
    has_div2 = "div. 2" in lowered
    if has_div1 and not has_div2:
        return "div1"
    if has_div2 and not has_div1:
        return "div2"
    if "div. 3" in lowered:
        return "div3"
    if "div. 4" in lowered:
        return "div4"
    return None


def group_contests_by_division(contests: Iterable[dict], limit: int = 50) -> dict[str, list[dict]]:
    """Bucket contests by division, newest first, at most `limit` per division."""
    grouped: dict[str, list[dict]] = {division: [] for division in DIVISIONS}
    for contest in contests:
        division = classify_division(contest.get("name", ""))
        if division is not None:
            grouped[division].append(contest)
    for division, items in grouped.items():
        items.sort(key=lambda c: c.get("startTimeSeconds") or 0, reverse=True)
        grouped[division] = items[:limit]
    return grouped
