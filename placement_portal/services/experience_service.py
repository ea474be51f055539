"""
Experience Service - submission, public browsing and owner edits.

Public listings only ever show approved experiences; moderation itself
lives in moderation_service.
"""

import logging
import re
from typing import Optional, List

from bson import ObjectId

from placement_portal.core.auth import is_staff
from placement_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from placement_portal.services.mongo_service import (
    ExperienceStore,
    CommentStore,
    ReportStore,
    UserStore,
    serialize_doc,
    serialize_docs,
    to_object_id,
)

logger = logging.getLogger(__name__)

DEFAULT_MODERATION_STATUS = "pending"
ANONYMOUS_NAME = "Anonymous"
AUTHOR_FIELDS = ("name", "username", "email")
MODERATOR_FIELDS = ("name", "username")
PROFILE_EXPERIENCE_FIELDS = {
    "company": 1, "role": 1, "branch": 1, "year": 1, "offerStatus": 1,
    "package": 1, "createdAt": 1, "views": 1,
}


def with_moderation_default(doc: dict) -> dict:
    """Older documents have no moderationStatus; they count as pending."""
    if doc is not None and not doc.get("moderationStatus"):
        doc["moderationStatus"] = DEFAULT_MODERATION_STATUS
    return doc


def pending_query() -> dict:
    """Matches explicit "pending" and documents missing the field."""
    return {"$or": [
        {"moderationStatus": DEFAULT_MODERATION_STATUS},
        {"moderationStatus": {"$exists": False}},
        {"moderationStatus": None},
    ]}


def contains_ignore_case(value: str) -> dict:
    """Case-insensitive substring match; the value is matched literally."""
    return {"$regex": re.escape(value), "$options": "i"}


def validate_rounds(rounds) -> None:
    if not rounds:
        raise ValidationError("At least one interview round is required")


class ExperienceService:
    """
    Experience lifecycle outside of moderation.
    """

    def __init__(self):
        self.experiences = ExperienceStore()
        self.comments = CommentStore()
        self.reports = ReportStore()
        self.users = UserStore()

    def get_or_404(self, experience_id) -> dict:
        oid = to_object_id(experience_id, "Experience")
        doc = self.experiences.get_by_id(oid)
        if not doc:
            raise NotFoundError("Experience not found")
        return doc

    def present(self, docs: List[dict], with_moderator: bool = False) -> List[dict]:
        """Populate author (and moderator) summaries, apply defaults, serialize."""
        self.users.populate(docs, "author", AUTHOR_FIELDS)
        if with_moderator:
            self.users.populate(docs, "moderatedBy", MODERATOR_FIELDS)
        return serialize_docs([with_moderation_default(doc) for doc in docs])

    def present_one(self, doc: dict, with_moderator: bool = False) -> dict:
        return self.present([doc], with_moderator)[0]

    # --------------------------------------------------------
    # Submission
    # --------------------------------------------------------

    def create(self, data: dict, user: Optional[dict] = None) -> dict:
        """
        Create a submission in the pending state.

        Anonymous when there is no caller or the caller asked for it; the
        author reference is then omitted entirely.
        """
        data = dict(data)
        validate_rounds(data.get("rounds"))
        anonymous = data.pop("isAnonymous", False) or user is None

        doc = {
            **data,
            "views": 0,
            "helpful": 0,
            "moderationStatus": DEFAULT_MODERATION_STATUS,
            "moderatedBy": None,
            "moderatedAt": None,
            "moderationNotes": None,
        }
        if anonymous:
            doc["author"] = None
            doc["authorName"] = data.get("authorName") or ANONYMOUS_NAME
        else:
            doc["author"] = ObjectId(user["user_id"])
            doc["authorName"] = data.get("authorName") or user.get("name") or ANONYMOUS_NAME

        oid = self.experiences.insert(doc)
        logger.info("Experience %s submitted for %s (%s)", oid, doc.get("company"), doc.get("role"))
        return self.present_one(self.experiences.get_by_id(oid))

    # --------------------------------------------------------
    # Public browsing
    # --------------------------------------------------------

    def list_public(
        self,
        company: Optional[str] = None,
        role: Optional[str] = None,
        branch: Optional[str] = None,
        year: Optional[int] = None,
        search: Optional[str] = None
    ) -> List[dict]:
        """Approved experiences only, newest first."""
        query = {"moderationStatus": "approved"}
        if company:
            query["company"] = contains_ignore_case(company)
        if role:
            query["role"] = contains_ignore_case(role)
        if branch:
            query["branch"] = contains_ignore_case(branch)
        if year:
            query["year"] = year
        if search:
            pattern = contains_ignore_case(search)
            query["$or"] = [{"company": pattern}, {"role": pattern}, {"tips": pattern}]
        return self.present(self.experiences.find(query))

    def get(self, experience_id, viewer: Optional[dict] = None) -> dict:
        """
        Fetch one experience and count the view.
        Unapproved experiences are only visible to their author and staff.
        """
        doc = with_moderation_default(self.get_or_404(experience_id))
        if doc["moderationStatus"] != "approved" and not self._can_manage(doc, viewer):
            raise NotFoundError("Experience not found")

        updated = self.experiences.increment(doc["_id"], "views")
        if updated is None:
            raise NotFoundError("Experience not found")
        return self.present_one(updated)

    def list_mine(self, user: dict) -> List[dict]:
        docs = self.experiences.find({"author": ObjectId(user["user_id"])})
        return self.present(docs, with_moderator=True)

    def list_approved_for_author(self, author_oid: ObjectId) -> List[dict]:
        docs = self.experiences.find(
            {"author": author_oid, "moderationStatus": "approved"},
            projection=PROFILE_EXPERIENCE_FIELDS
        )
        return serialize_docs(docs)

    def mark_helpful(self, experience_id) -> dict:
        oid = to_object_id(experience_id, "Experience")
        updated = self.experiences.increment(oid, "helpful")
        if updated is None:
            raise NotFoundError("Experience not found")
        return {"_id": str(oid), "helpful": updated.get("helpful", 0)}

    # --------------------------------------------------------
    # Owner edits / deletion
    # --------------------------------------------------------

    def _can_manage(self, doc: dict, user: Optional[dict]) -> bool:
        if user is None:
            return False
        author = doc.get("author")
        return (author is not None and str(author) == user["user_id"]) or is_staff(user)

    def update_by_author(self, experience_id, user: dict, fields: dict) -> dict:
        doc = self.get_or_404(experience_id)
        author = doc.get("author")
        if author is None or str(author) != user["user_id"]:
            raise AuthorizationError("Not authorized to update this experience")
        if "rounds" in fields:
            validate_rounds(fields["rounds"])
        if not fields:
            raise ValidationError("No fields to update")

        updated = self.experiences.update(doc["_id"], fields)
        if updated is None:
            raise NotFoundError("Experience not found")
        return self.present_one(updated)

    def delete(self, experience_id, user: dict) -> dict:
        doc = self.get_or_404(experience_id)
        if not self._can_manage(doc, user):
            raise AuthorizationError("Not authorized to delete this experience")
        return self.delete_with_dependents(doc["_id"])

    def delete_with_dependents(self, oid: ObjectId) -> dict:
        """
        Delete an experience plus its comments and reports.
        Notifications referencing it are kept.
        """
        if not self.experiences.delete(oid):
            raise NotFoundError("Experience not found")
        comments = self.comments.delete_for_experience(oid)
        reports = self.reports.delete_for_experience(oid)
        logger.info(
            "Experience %s deleted with %d comments and %d reports", oid, comments, reports
        )
        return {"deletedComments": comments, "deletedReports": reports}


def get_experience_service() -> ExperienceService:
    """Get experience service instance."""
    return ExperienceService()
