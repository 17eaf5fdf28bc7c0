"""Collection accessors and document shape helpers. Use get_db()[name] for raw access."""
from datetime import datetime, timezone

from pymongo.collection import Collection
from pymongo.database import Database

from db.client import get_db

CONTESTS = "contests"
PROBLEMS_BY_RATING = "problems_by_rating"
PROBLEMS_BY_TOPIC = "problems_by_topic"
VISIT_COUNTER = "visit_counter"

# Snapshot collections are rebuilt here and renamed over the live name
STAGING_SUFFIX = "_staging"

# The visit counter is a singleton document
VISIT_COUNTER_ID = "visits"


def _coll(db: Database, name: str) -> Collection:
    return db[name]


def contests_collection() -> Collection:
    return _coll(get_db(), CONTESTS)


def problems_by_rating_collection() -> Collection:
    return _coll(get_db(), PROBLEMS_BY_RATING)


def problems_by_topic_collection() -> Collection:
    return _coll(get_db(), PROBLEMS_BY_TOPIC)


def visit_counter_collection() -> Collection:
    return _coll(get_db(), VISIT_COUNTER)


def staging_name(name: str) -> str:
    return f"{name}{STAGING_SUFFIX}"


# --- Document helpers (for consistent keys) ---
def visit_counter_doc(count: int = 0) -> dict:
    return {"count": count, "lastUpdated": datetime.now(timezone.utc)}
