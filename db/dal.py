"""Data access layer: contest snapshot replace/read and the visit counter."""
from datetime import datetime, timezone

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from config import settings
from db.client import ensure_indexes, get_db
from db.collections import (
    CONTESTS,
    PROBLEMS_BY_RATING,
    PROBLEMS_BY_TOPIC,
    VISIT_COUNTER_ID,
    contests_collection,
    problems_by_rating_collection,
    problems_by_topic_collection,
    staging_name,
    visit_counter_collection,
    visit_counter_doc,
)
from utils.logging import get_logger

logger = get_logger(__name__)

# Internal Mongo ids are not part of the API shape
_NO_ID = {"_id": 0}


# --- Snapshot writes ---
def _replace_collection(db: Database, name: str, docs: list[dict]) -> None:
    """Swap the contents of `name` for `docs` in one step.

    Documents go into a staging collection which is then renamed over the live
    one, so readers see either the old snapshot or the new one, never a mix.
    """
    if not docs:
        db[name].delete_many({})
        return
    staging = staging_name(name)
    db.drop_collection(staging)
    db[staging].insert_many([dict(d) for d in docs])
    db[staging].rename(name, dropTarget=True)


def replace_snapshot(contests: list[dict], rating_buckets: list[dict], topic_buckets: list[dict]) -> None:
    db = get_db()
    _replace_collection(db, CONTESTS, contests)
    _replace_collection(db, PROBLEMS_BY_RATING, rating_buckets)
    _replace_collection(db, PROBLEMS_BY_TOPIC, topic_buckets)
    # rename drops the target's indexes along with it
    ensure_indexes(db)
    logger.info(
        "Snapshot replaced: %d contests, %d rating buckets, %d topic buckets",
        len(contests), len(rating_buckets), len(topic_buckets),
    )


# --- Snapshot reads ---
def get_contests(division: str, limit: int | None = None) -> list[dict]:
    limit = limit or settings.CONTESTS_PER_DIVISION
    cursor = contests_collection().find({"division": division}, _NO_ID).sort("startTimeSeconds", DESCENDING).limit(limit)
    return list(cursor)


def get_problems_by_rating(division: str) -> list[dict]:
    return list(problems_by_rating_collection().find({"division": division}, _NO_ID).sort("rating", 1))


def get_problems_by_topic(division: str) -> list[dict]:
    return list(problems_by_topic_collection().find({"division": division}, _NO_ID).sort("topic", 1))


# --- Visit counter ---
def increment_visits() -> int:
    """Atomically bump the counter (creating it on first use) and return the new count."""
    doc = visit_counter_collection().find_one_and_update(
        {"_id": VISIT_COUNTER_ID},
        {"$inc": {"count": 1}, "$set": {"lastUpdated": datetime.now(timezone.utc)}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return int(doc["count"])


def get_visits() -> int:
    doc = visit_counter_collection().find_one_and_update(
        {"_id": VISIT_COUNTER_ID},
        {"$setOnInsert": visit_counter_doc(0)},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return int(doc["count"])
