"""
Announcement Service

VISIBILITY:
    An announcement is public iff isActive and (no expiresAt or expiresAt
    is still in the future). Inactive/expired ones stay visible to admins.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List

from bson import ObjectId

from placement_portal.core.exceptions import NotFoundError, ValidationError
from placement_portal.services.mongo_service import (
    AnnouncementStore,
    UserStore,
    serialize_docs,
    to_object_id,
)

logger = logging.getLogger(__name__)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored datetimes are naive UTC, like everything pymongo hands back."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def visible_query(now: Optional[datetime] = None) -> dict:
    now = now or datetime.utcnow()
    return {
        "isActive": True,
        "$or": [
            {"expiresAt": None},
            {"expiresAt": {"$gt": now}},
        ],
    }


class AnnouncementService:

    def __init__(self):
        self.announcements = AnnouncementStore()
        self.users = UserStore()

    def _present(self, docs: List[dict]) -> List[dict]:
        self.users.populate(docs, "publishedBy", ("name", "username"))
        return serialize_docs(docs)

    def list_active(self) -> List[dict]:
        """Public listing, newest first."""
        return self._present(self.announcements.find(visible_query()))

    def list_all(self) -> List[dict]:
        return self._present(self.announcements.find())

    def view(self, announcement_id) -> dict:
        """Fetch a visible announcement and count the view."""
        oid = to_object_id(announcement_id, "Announcement")
        if not self.announcements.count({"_id": oid, **visible_query()}):
            raise NotFoundError("Announcement not found")
        updated = self.announcements.increment(oid, "views")
        if updated is None:
            raise NotFoundError("Announcement not found")
        return self._present([updated])[0]

    def create(self, data: dict, publisher_id: str) -> dict:
        title = (data.get("title") or "").strip()
        content = (data.get("content") or "").strip()
        if not title or not content:
            raise ValidationError("Title and content are required")

        oid = self.announcements.insert({
            "title": title,
            "content": content,
            "type": data.get("type") or "general",
            "priority": data.get("priority") or "medium",
            "isActive": True,
            "publishedBy": ObjectId(publisher_id),
            "publishedAt": datetime.utcnow(),
            "expiresAt": to_naive_utc(data.get("expiresAt")),
            "views": 0,
        })
        logger.info("Announcement %s published: %s", oid, title)
        return self._present([self.announcements.get_by_id(oid)])[0]

    def update(self, announcement_id, fields: dict) -> dict:
        oid = to_object_id(announcement_id, "Announcement")
        fields = dict(fields)
        if "expiresAt" in fields:
            fields["expiresAt"] = to_naive_utc(fields["expiresAt"])

        updated = self.announcements.update(oid, fields) if fields else self.announcements.get_by_id(oid)
        if updated is None:
            raise NotFoundError("Announcement not found")
        return self._present([updated])[0]

    def delete(self, announcement_id) -> None:
        oid = to_object_id(announcement_id, "Announcement")
        if not self.announcements.delete(oid):
            raise NotFoundError("Announcement not found")


def get_announcement_service() -> AnnouncementService:
    """Get announcement service instance."""
    return AnnouncementService()
