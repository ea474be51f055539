"""
Notification Service - per-user inbox of comment activity.

Notifications are append-only: they are created once per qualifying
top-level comment and afterwards only their `read` flag changes. Nothing
here deletes them, so the experience or comment they point to may be gone;
reads fill those fields with None instead of failing.
"""

import logging
from typing import List, Optional

from bson import ObjectId

from placement_portal.core.config import get_settings
from placement_portal.core.exceptions import NotFoundError
from placement_portal.services.mongo_service import (
    CommentStore,
    ExperienceStore,
    NotificationStore,
    UserStore,
    serialize_doc,
    serialize_docs,
    to_object_id,
)

logger = logging.getLogger(__name__)

COMMENT_NOTIFICATION = "comment"


class NotificationService:
    """Fan-out on comment creation plus read-state operations."""

    def __init__(self):
        self.notifications = NotificationStore()
        self.experiences = ExperienceStore()
        self.comments = CommentStore()
        self.users = UserStore()

    def notify_comment(self, experience: dict, comment: dict) -> Optional[ObjectId]:
        """
        Notify the experience author about a new top-level comment.

        Skipped for anonymous experiences and for the author commenting on
        their own experience. Returns the notification id, if one was made.
        """
        author = experience.get("author")
        if author is None or author == comment["author"]:
            return None

        oid = self.notifications.insert({
            "user": author,
            "type": COMMENT_NOTIFICATION,
            "experience": experience["_id"],
            "comment": comment["_id"],
            "read": False,
        })
        logger.info("Notification %s created for user %s (comment %s)", oid, author, comment["_id"])
        return oid

    def list_recent(self, user_id: str, limit: Optional[int] = None) -> List[dict]:
        """
        Newest notifications with experience {company, role} and
        comment {content, author{name, username}} filled in.
        """
        limit = limit or get_settings().notification_list_limit
        docs = self.notifications.find_for_user(ObjectId(user_id), limit)

        experience_ids = list({d["experience"] for d in docs if d.get("experience")})
        comment_ids = list({d["comment"] for d in docs if d.get("comment")})

        experiences = {
            e["_id"]: e for e in self.experiences.find(
                {"_id": {"$in": experience_ids}}, projection={"company": 1, "role": 1}
            )
        } if experience_ids else {}
        comments = {
            c["_id"]: c for c in self.comments.find(
                {"_id": {"$in": comment_ids}}, projection={"content": 1, "author": 1}
            )
        } if comment_ids else {}
        self.users.populate(list(comments.values()), "author", ("name", "username"))

        for doc in docs:
            doc["experience"] = experiences.get(doc.get("experience"))
            doc["comment"] = comments.get(doc.get("comment"))
        return serialize_docs(docs)

    def unread_count(self, user_id: str) -> int:
        return self.notifications.count_unread(ObjectId(user_id))

    def mark_read(self, notification_id, user_id: str) -> dict:
        """Mark one notification read; other users' notifications are NotFound."""
        oid = to_object_id(notification_id, "Notification")
        updated = self.notifications.mark_read(oid, ObjectId(user_id))
        if updated is None:
            raise NotFoundError("Notification not found")
        return serialize_doc(updated)

    def mark_all_read(self, user_id: str) -> int:
        """Idempotent: a second call simply modifies nothing."""
        return self.notifications.mark_all_read(ObjectId(user_id))


def get_notification_service() -> NotificationService:
    """Get notification service instance."""
    return NotificationService()
