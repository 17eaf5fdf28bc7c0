"""MongoDB connection and database access."""
import certifi
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from config import settings
from utils.logging import get_logger

logger = get_logger(__name__)

_client: MongoClient | None = None


def get_client() -> MongoClient:
    global _client
    if _client is None:
        kwargs = {"serverSelectionTimeoutMS": 10000}
        uri = settings.MONGODB_URI or ""
        if "mongodb+srv://" in uri:
            kwargs["tlsCAFile"] = certifi.where()
        _client = MongoClient(uri, **kwargs)
        logger.info("MongoDB client created for database %s", settings.MONGODB_DB)
    return _client


def get_db() -> Database:
    return get_client()[settings.MONGODB_DB]


def ensure_indexes(db: Database | None = None) -> None:
    """Create indexes for the snapshot collections. Safe to call repeatedly."""
    db = db if db is not None else get_db()

    db.contests.create_index("id", unique=True)
    db.contests.create_index([("division", ASCENDING), ("startTimeSeconds", DESCENDING)])
    db.problems_by_rating.create_index([("division", ASCENDING), ("rating", ASCENDING)], unique=True)
    db.problems_by_topic.create_index([("division", ASCENDING), ("topic", ASCENDING)], unique=True)

    logger.info("MongoDB indexes ensured")
