"""
Comment Service - discussion threads on experiences.

THREADING:
    Top-level comments: any authenticated user.
    Replies: one level deep, only by the experience's own author.
    Deleting a top-level comment deletes its replies.

Creating a top-level comment and its notification are two separate
writes. If the notification write fails the comment stays; the error is
still raised to the caller.
"""

import logging
from typing import List, Optional

from bson import ObjectId

from placement_portal.core.auth import is_staff
from placement_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from placement_portal.services.experience_service import ExperienceService
from placement_portal.services.mongo_service import (
    CommentStore,
    UserStore,
    serialize_docs,
    to_object_id,
)
from placement_portal.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 1000
COMMENT_AUTHOR_FIELDS = ("name", "username", "email", "role")


def clean_content(content: Optional[str], kind: str = "Comment") -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError(f"{kind} content is required")
    if len(content) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"{kind} must be less than {MAX_COMMENT_LENGTH} characters")
    return content


class CommentService:
    """Comments, replies and the notification fan-out they trigger."""

    def __init__(self):
        self.comments = CommentStore()
        self.users = UserStore()
        self.experience_service = ExperienceService()
        self.notification_service = NotificationService()

    def _present(self, docs: List[dict]) -> List[dict]:
        self.users.populate(docs, "author", COMMENT_AUTHOR_FIELDS)
        return serialize_docs(docs)

    def list_for_experience(self, experience_id) -> List[dict]:
        """All comments and replies, newest first."""
        experience = self.experience_service.get_or_404(experience_id)
        return self._present(self.comments.find_for_experience(experience["_id"]))

    def create_comment(self, experience_id, user: dict, content: Optional[str]) -> dict:
        """Top-level comment; notifies the experience author (see NotificationService)."""
        content = clean_content(content)
        experience = self.experience_service.get_or_404(experience_id)

        comment = {
            "experience": experience["_id"],
            "author": ObjectId(user["user_id"]),
            "content": content,
            "parentComment": None,
        }
        comment["_id"] = self.comments.insert(comment)

        self.notification_service.notify_comment(experience, comment)
        return self._present([self.comments.get_by_id(comment["_id"])])[0]

    def create_reply(self, experience_id, comment_id, user: dict, content: Optional[str]) -> dict:
        """Reply from the experience author to a top-level comment. No notification."""
        content = clean_content(content, "Reply")
        experience = self.experience_service.get_or_404(experience_id)

        author = experience.get("author")
        if author is None:
            raise AuthorizationError("This experience has no linked author; replies are not allowed.")
        if str(author) != user["user_id"]:
            raise AuthorizationError("Only the person who posted this experience can reply.")

        parent = self.comments.get_by_id(to_object_id(comment_id, "Comment"))
        if not parent:
            raise NotFoundError("Comment not found")
        if parent["experience"] != experience["_id"]:
            raise ValidationError("Comment does not belong to this experience.")
        if parent.get("parentComment"):
            raise ValidationError("Cannot reply to a reply.")

        oid = self.comments.insert({
            "experience": experience["_id"],
            "author": ObjectId(user["user_id"]),
            "content": content,
            "parentComment": parent["_id"],
        })
        return self._present([self.comments.get_by_id(oid)])[0]

    def delete_comment(self, comment_id, user: dict) -> int:
        """
        Delete a comment (author or staff) together with its replies.
        Returns the number of comments removed.
        """
        comment = self.comments.get_by_id(to_object_id(comment_id, "Comment"))
        if not comment:
            raise NotFoundError("Comment not found")

        if str(comment["author"]) != user["user_id"] and not is_staff(user):
            raise AuthorizationError("Not authorized to delete this comment")

        replies = self.comments.delete_replies(comment["_id"])
        self.comments.delete(comment["_id"])
        logger.info("Comment %s deleted with %d replies", comment["_id"], replies)
        return replies + 1


def get_comment_service() -> CommentService:
    """Get comment service instance."""
    return CommentService()
