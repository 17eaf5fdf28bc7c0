"""Per-division statistics over the stored contest snapshot."""
from typing import Any

from analytics.user_stats import rating_histogram, topic_distribution
from db import dal


def build_division_stats(division: str, store: Any = dal) -> dict[str, Any]:
    """Rating histogram, topic distribution and totals for one division.

    Problems are counted across rating buckets, so unrated problems are not
    included. An unknown division yields empty series and zero totals.
    """
    by_rating = {str(b["rating"]): b.get("problems") or [] for b in store.get_problems_by_rating(division)}
    by_topic = {b["topic"]: b.get("problems") or [] for b in store.get_problems_by_topic(division)}
    return {
        "division": division,
        "ratingHistogram": rating_histogram(by_rating),
        "topicDistribution": topic_distribution(by_topic),
        "totalContests": len(store.get_contests(division)),
        "totalProblems": sum(len(problems) for problems in by_rating.values()),
        "uniqueTopics": len(by_topic),
    }
