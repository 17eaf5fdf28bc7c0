from db.client import get_db
from db.collections import (
    contests_collection,
    problems_by_rating_collection,
    problems_by_topic_collection,
    visit_counter_collection,
)

__all__ = [
    "get_db",
    "contests_collection",
    "problems_by_rating_collection",
    "problems_by_topic_collection",
    "visit_counter_collection",
]
