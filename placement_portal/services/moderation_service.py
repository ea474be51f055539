"""
Moderation Service - approval lifecycle of experiences.

STATES:
    pending (initial) -> approved | rejected

Any transition is allowed at any time: staff may re-approve, flip an
approved experience to rejected, or send everything back to pending with
reset_all(). Transitions are single-document updates; concurrent calls on
the same experience race and the last write wins.
"""

import logging
from datetime import datetime
from typing import Optional, List

from bson import ObjectId

from placement_portal.core.exceptions import NotFoundError, ValidationError
from placement_portal.schemas.schemas import ModerationStatus
from placement_portal.services.experience_service import (
    ExperienceService,
    pending_query,
    validate_rounds,
)
from placement_portal.services.mongo_service import (
    AnnouncementStore,
    ReportStore,
    to_object_id,
)

logger = logging.getLogger(__name__)

MODERATION_STATUSES = {s.value for s in ModerationStatus}


class ModerationService:
    """
    Staff-facing operations on experiences.
    Callers are expected to have passed the staff check already.
    """

    def __init__(self):
        self.experience_service = ExperienceService()
        self.experiences = self.experience_service.experiences
        self.reports = ReportStore()
        self.announcements = AnnouncementStore()

    # --------------------------------------------------------
    # Queues
    # --------------------------------------------------------

    def list_pending(self) -> List[dict]:
        """Experiences awaiting review, newest first."""
        docs = self.experiences.find(pending_query())
        return self.experience_service.present(docs)

    def list_experiences(self, status: Optional[str] = None) -> List[dict]:
        """All experiences, optionally filtered by moderation status."""
        query = {}
        if status:
            if status not in MODERATION_STATUSES:
                raise ValidationError(f"Invalid moderation status: {status}")
            query = pending_query() if status == "pending" else {"moderationStatus": status}
        docs = self.experiences.find(query)
        return self.experience_service.present(docs, with_moderator=True)

    # --------------------------------------------------------
    # Transitions
    # --------------------------------------------------------

    def _transition(self, experience_id, status: str, moderator_id: str, notes: Optional[str]) -> dict:
        oid = to_object_id(experience_id, "Experience")
        fields = {
            "moderationStatus": status,
            "moderatedBy": ObjectId(moderator_id),
            "moderatedAt": datetime.utcnow(),
        }
        if notes:
            fields["moderationNotes"] = notes

        updated = self.experiences.update(oid, fields)
        if updated is None:
            raise NotFoundError("Experience not found")

        logger.info("Experience %s %s by %s", oid, status, moderator_id)
        return self.experience_service.present_one(updated, with_moderator=True)

    def approve(self, experience_id, moderator_id: str, notes: Optional[str] = None) -> dict:
        """Mark approved. Re-approving overwrites moderator and timestamp."""
        return self._transition(experience_id, ModerationStatus.approved.value, moderator_id, notes)

    def reject(self, experience_id, moderator_id: str, notes: Optional[str] = None) -> dict:
        """Mark rejected. Same semantics as approve()."""
        return self._transition(experience_id, ModerationStatus.rejected.value, moderator_id, notes)

    def reset_all(self) -> int:
        """
        Send every reviewed experience back to pending and clear moderator fields.

        Irreversible. Returns how many documents had a non-pending status,
        including unknown legacy values.
        Already-pending documents are cleared too but not counted.
        """
        cleared = {
            "moderationStatus": ModerationStatus.pending.value,
            "moderatedBy": None,
            "moderatedAt": None,
            "moderationNotes": None,
        }
        modified = self.experiences.update_many(
            {"moderationStatus": {"$nin": [ModerationStatus.pending.value, None]}},
            cleared
        )
        self.experiences.update_many(pending_query(), cleared)

        logger.warning("Moderation reset: %d experiences returned to pending", modified)
        return modified

    # --------------------------------------------------------
    # Staff edits
    # --------------------------------------------------------

    def update_experience(self, experience_id, fields: dict) -> dict:
        """Staff may edit any field of any experience."""
        oid = to_object_id(experience_id, "Experience")
        if "rounds" in fields:
            validate_rounds(fields["rounds"])
        if "moderationStatus" in fields and fields["moderationStatus"] not in MODERATION_STATUSES:
            raise ValidationError(f"Invalid moderation status: {fields['moderationStatus']}")

        updated = self.experiences.update(oid, fields) if fields else self.experiences.get_by_id(oid)
        if updated is None:
            raise NotFoundError("Experience not found")
        return self.experience_service.present_one(updated, with_moderator=True)

    def delete_experience(self, experience_id) -> dict:
        oid = to_object_id(experience_id, "Experience")
        return self.experience_service.delete_with_dependents(oid)

    # --------------------------------------------------------
    # Dashboard
    # --------------------------------------------------------

    def stats(self) -> dict:
        return {
            "experiences": {
                "pending": self.experiences.count(pending_query()),
                "total": self.experiences.count(),
            },
            "reports": {
                "pending": self.reports.count({"status": "pending"}),
                "total": self.reports.count(),
            },
            "announcements": {
                "active": self.announcements.count({"isActive": True}),
                "total": self.announcements.count(),
            },
        }


def get_moderation_service() -> ModerationService:
    """Get moderation service instance."""
    return ModerationService()
