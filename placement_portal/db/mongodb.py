"""
MongoDB Connection Utility

MongoDB stores every portal entity:
- Experiences (with embedded interview rounds)
- Comments and replies
- Reports, Announcements, Notifications
- Company standardizations
- Users

WHY MongoDB for these?
- Schema-flexible: older experience documents lack moderation fields
- Document-oriented: rounds/questions are naturally embedded
- Fields get added across versions (e.g. username) without migrations
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from placement_portal.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# One client per process; pymongo pools connections itself
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Lazily create the shared client."""
    global _client
    if _client is None:
        _client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            appname="placement-portal",
        )
        logger.info("MongoDB client created for database %s", settings.mongodb_db)
    return _client


def get_mongo_db() -> Database:
    """Portal database named by MONGODB_DB."""
    global _db
    if _db is None:
        _db = get_mongo_client()[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Collection by name; pass a COLLECTIONS value."""
    return get_mongo_db()[name]


def close_mongo_connection() -> None:
    """Close the shared client; the next call to get_mongo_db() reconnects."""
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


def test_mongo_connection() -> bool:
    """Ping the server. Logs and returns False when it is unreachable."""
    try:
        get_mongo_client().admin.command("ping")
    except PyMongoError as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False
    return True


# Collection name constants (avoid typos)
COLLECTIONS = {
    "experiences": "experiences",
    "comments": "comments",
    "reports": "reports",
    "announcements": "announcements",
    "notifications": "notifications",
    "company_standardizations": "company_standardizations",
    "users": "users"
}


def init_mongo_indexes():
    """
    Create indexes for uniqueness and query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # Uniqueness constraints
    db[COLLECTIONS["users"]].create_index("email", unique=True)
    db[COLLECTIONS["company_standardizations"]].create_index("standardName", unique=True)

    # Experience listing / filtering
    experiences = db[COLLECTIONS["experiences"]]
    experiences.create_index([("company", ASCENDING), ("role", ASCENDING)])
    experiences.create_index([("branch", ASCENDING), ("year", ASCENDING)])
    experiences.create_index([("createdAt", DESCENDING)])
    experiences.create_index("moderationStatus")
    experiences.create_index("author")

    # Comments per experience, replies per parent
    comments = db[COLLECTIONS["comments"]]
    comments.create_index([("experience", ASCENDING), ("createdAt", DESCENDING)])
    comments.create_index("parentComment")

    reports = db[COLLECTIONS["reports"]]
    reports.create_index([("status", ASCENDING), ("createdAt", DESCENDING)])
    reports.create_index([("experience", ASCENDING), ("status", ASCENDING)])

    db[COLLECTIONS["announcements"]].create_index([
        ("isActive", ASCENDING),
        ("publishedAt", DESCENDING)
    ])

    # Inbox queries: unread count and newest-first listing
    db[COLLECTIONS["notifications"]].create_index([
        ("user", ASCENDING),
        ("read", ASCENDING),
        ("createdAt", DESCENDING)
    ])

    logger.info("MongoDB indexes created successfully")
