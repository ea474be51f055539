"""
MongoDB Service - Record store for every portal collection.

Collections in this database:
1. experiences               - Interview experiences with embedded rounds
2. comments                  - Comments and one level of replies
3. reports                   - User flags on experiences
4. announcements             - Admin announcements
5. notifications             - Per-user comment notifications
6. company_standardizations  - Canonical company names + aliases
7. users                     - Accounts (password hash never leaves this module)

Stores return raw documents (ObjectId values intact) so services can follow
references; call serialize_doc() before handing a document to the API layer.
"""

from datetime import datetime
from typing import Optional, List, Dict, Any, Iterable
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ASCENDING, ReturnDocument
from pymongo.collection import Collection

from placement_portal.core.exceptions import NotFoundError
from placement_portal.db.mongodb import get_collection, COLLECTIONS


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value


def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document (including nested references) to a JSON-serializable dict."""
    if doc is None:
        return None
    return _serialize_value(doc)


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def to_object_id(value: Any, entity: str = "Document") -> ObjectId:
    """
    Parse an id coming from a URL or request body.
    A malformed id can never match a document, so it is reported as NotFound.
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise NotFoundError(f"{entity} not found")


# ============================================================
# BASE STORE
# Shared single-document operations
# ============================================================

class DocumentStore:
    """
    Thin wrapper around one collection.
    Every write stamps updatedAt; inserts also stamp createdAt.
    """

    collection_key: str = None
    default_sort = [("createdAt", DESCENDING)]

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS[self.collection_key])

    def insert(self, doc: dict) -> ObjectId:
        now = datetime.utcnow()
        doc.setdefault("createdAt", now)
        doc.setdefault("updatedAt", now)
        result = self.collection.insert_one(doc)
        return result.inserted_id

    def get_by_id(self, oid: ObjectId, projection: dict = None) -> Optional[dict]:
        return self.collection.find_one({"_id": oid}, projection)

    def find(self, query: dict = None, sort: list = None, limit: int = 0, projection: dict = None) -> List[dict]:
        cursor = self.collection.find(query or {}, projection).sort(sort or self.default_sort)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    def update(self, oid: ObjectId, fields: dict, query: dict = None) -> Optional[dict]:
        """$set fields on one document; returns the updated document or None."""
        fields = dict(fields)
        fields["updatedAt"] = datetime.utcnow()
        return self.collection.find_one_and_update(
            {"_id": oid, **(query or {})},
            {"$set": fields},
            return_document=ReturnDocument.AFTER
        )

    def increment(self, oid: ObjectId, field: str, amount: int = 1) -> Optional[dict]:
        """Atomic counter bump at the storage layer (no read-modify-write)."""
        return self.collection.find_one_and_update(
            {"_id": oid},
            {"$inc": {field: amount}},
            return_document=ReturnDocument.AFTER
        )

    def delete(self, oid: ObjectId) -> bool:
        result = self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    def count(self, query: dict = None) -> int:
        return self.collection.count_documents(query or {})

    def distinct(self, field: str, query: dict = None) -> list:
        return self.collection.distinct(field, query or {})


# ============================================================
# USERS COLLECTION
# ============================================================

# Password hash is excluded unless explicitly requested
PUBLIC_USER_PROJECTION = {"password": 0}


class UserStore(DocumentStore):
    """Accounts. Reads exclude the password hash by default."""

    collection_key = "users"

    def get_by_id(self, oid: ObjectId, include_password: bool = False) -> Optional[dict]:
        projection = None if include_password else PUBLIC_USER_PROJECTION
        return self.collection.find_one({"_id": oid}, projection)

    def get_by_email(self, email: str, include_password: bool = False) -> Optional[dict]:
        projection = None if include_password else PUBLIC_USER_PROJECTION
        return self.collection.find_one({"email": email.strip().lower()}, projection)

    def get_by_username(self, username: str) -> Optional[dict]:
        return self.collection.find_one(
            {"username": username.strip().lower()}, PUBLIC_USER_PROJECTION
        )

    def find(self, query: dict = None, sort: list = None, limit: int = 0, projection: dict = None) -> List[dict]:
        return super().find(query, sort, limit, projection or PUBLIC_USER_PROJECTION)

    def update(self, oid: ObjectId, fields: dict, query: dict = None) -> Optional[dict]:
        fields = dict(fields)
        fields["updatedAt"] = datetime.utcnow()
        return self.collection.find_one_and_update(
            {"_id": oid, **(query or {})},
            {"$set": fields},
            projection=PUBLIC_USER_PROJECTION,
            return_document=ReturnDocument.AFTER
        )

    def get_summaries(self, ids: Iterable[ObjectId], fields: Iterable[str]) -> Dict[ObjectId, dict]:
        """
        Fetch {_id, <fields>} for many users in one query.
        Used to "populate" author / moderator references.
        """
        ids = list({i for i in ids if isinstance(i, ObjectId)})
        if not ids:
            return {}
        projection = {f: 1 for f in fields}
        cursor = self.collection.find({"_id": {"$in": ids}}, projection)
        return {doc["_id"]: doc for doc in cursor}

    def populate(self, docs: List[dict], field: str, fields: Iterable[str]) -> List[dict]:
        """
        Replace the user ObjectId stored under `field` with a user summary.
        Missing users become None; documents without the field are left as-is.
        """
        summaries = self.get_summaries((doc.get(field) for doc in docs), fields)
        for doc in docs:
            ref = doc.get(field)
            if isinstance(ref, ObjectId):
                doc[field] = summaries.get(ref)
        return docs


# ============================================================
# EXPERIENCES COLLECTION
# ============================================================

class ExperienceStore(DocumentStore):
    """Interview experiences. Rounds/questions are embedded."""

    collection_key = "experiences"

    def update_many(self, query: dict, fields: dict) -> int:
        """Bulk $set; returns the number of modified documents."""
        fields = dict(fields)
        fields["updatedAt"] = datetime.utcnow()
        result = self.collection.update_many(query, {"$set": fields})
        return result.modified_count


# ============================================================
# COMMENTS COLLECTION
# ============================================================

class CommentStore(DocumentStore):
    """Comments; parentComment is None for top-level comments."""

    collection_key = "comments"

    def find_for_experience(self, experience_oid: ObjectId) -> List[dict]:
        return self.find({"experience": experience_oid})

    def delete_replies(self, parent_oid: ObjectId) -> int:
        result = self.collection.delete_many({"parentComment": parent_oid})
        return result.deleted_count

    def delete_for_experience(self, experience_oid: ObjectId) -> int:
        result = self.collection.delete_many({"experience": experience_oid})
        return result.deleted_count


# ============================================================
# REPORTS COLLECTION
# ============================================================

class ReportStore(DocumentStore):
    """Flags raised on experiences, reviewed by staff."""

    collection_key = "reports"

    def delete_for_experience(self, experience_oid: ObjectId) -> int:
        result = self.collection.delete_many({"experience": experience_oid})
        return result.deleted_count


# ============================================================
# ANNOUNCEMENTS COLLECTION
# ============================================================

class AnnouncementStore(DocumentStore):
    """Admin announcements, newest publication first."""

    collection_key = "announcements"
    default_sort = [("publishedAt", DESCENDING)]


# ============================================================
# NOTIFICATIONS COLLECTION
# Append-only inbox; only the read flag ever changes
# ============================================================

class NotificationStore(DocumentStore):
    """Per-user notifications."""

    collection_key = "notifications"

    def find_for_user(self, user_oid: ObjectId, limit: int) -> List[dict]:
        return self.find({"user": user_oid}, limit=limit)

    def count_unread(self, user_oid: ObjectId) -> int:
        return self.count({"user": user_oid, "read": False})

    def mark_read(self, oid: ObjectId, user_oid: ObjectId) -> Optional[dict]:
        """Only matches when the notification belongs to user_oid."""
        return self.update(oid, {"read": True}, query={"user": user_oid})

    def mark_all_read(self, user_oid: ObjectId) -> int:
        result = self.collection.update_many(
            {"user": user_oid, "read": False},
            {"$set": {"read": True, "updatedAt": datetime.utcnow()}}
        )
        return result.modified_count


# ============================================================
# COMPANY STANDARDIZATIONS COLLECTION
# ============================================================

class CompanyStandardizationStore(DocumentStore):
    """Canonical company names with their known spelling variations."""

    collection_key = "company_standardizations"
    default_sort = [("standardName", ASCENDING)]

    def get_by_name(self, standard_name: str) -> Optional[dict]:
        return self.collection.find_one({"standardName": standard_name})
