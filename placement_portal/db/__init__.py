"""
Database module - MongoDB connection.
"""
from placement_portal.db.mongodb import (
    COLLECTIONS,
    close_mongo_connection,
    get_collection,
    get_mongo_db,
    test_mongo_connection,
)

__all__ = [
    "COLLECTIONS",
    "close_mongo_connection",
    "get_collection",
    "get_mongo_db",
    "test_mongo_connection",
]
