"""
Report Service - users flag experiences, staff review the flags.
"""

import logging
from datetime import datetime
from typing import Optional, List

from bson import ObjectId

from placement_portal.core.exceptions import NotFoundError, ValidationError
from placement_portal.schemas.schemas import ReportStatus
from placement_portal.services.experience_service import ExperienceService, with_moderation_default
from placement_portal.services.mongo_service import (
    ExperienceStore,
    ReportStore,
    UserStore,
    serialize_docs,
    to_object_id,
)

logger = logging.getLogger(__name__)

REPORT_STATUSES = {s.value for s in ReportStatus}
REPORTED_EXPERIENCE_FIELDS = {
    "company": 1, "role": 1, "authorName": 1, "branch": 1, "year": 1, "package": 1,
    "offerStatus": 1, "rounds": 1, "tips": 1, "views": 1, "createdAt": 1, "moderationStatus": 1,
}


class ReportService:

    def __init__(self):
        self.reports = ReportStore()
        self.experiences = ExperienceStore()
        self.users = UserStore()

    def _present(self, docs: List[dict]) -> List[dict]:
        experience_ids = list({d["experience"] for d in docs if d.get("experience")})
        experiences = {
            e["_id"]: with_moderation_default(e) for e in self.experiences.find(
                {"_id": {"$in": experience_ids}}, projection=REPORTED_EXPERIENCE_FIELDS
            )
        } if experience_ids else {}
        for doc in docs:
            doc["experience"] = experiences.get(doc.get("experience"))

        self.users.populate(docs, "reportedBy", ("name", "username", "email"))
        self.users.populate(docs, "reviewedBy", ("name", "username"))
        return serialize_docs(docs)

    def create(self, experience_id, reason: str, description: Optional[str], user: Optional[dict]) -> dict:
        """Flag an experience. Anonymous reports are allowed."""
        experience = ExperienceService().get_or_404(experience_id)
        oid = self.reports.insert({
            "experience": experience["_id"],
            "reportedBy": ObjectId(user["user_id"]) if user else None,
            "reason": reason,
            "description": description,
            "status": ReportStatus.pending.value,
            "reviewedBy": None,
            "reviewedAt": None,
            "adminNotes": None,
        })
        logger.info("Report %s filed on experience %s (%s)", oid, experience["_id"], reason)
        return self._present([self.reports.get_by_id(oid)])[0]

    def list_reports(self, status: Optional[str] = None) -> List[dict]:
        query = {}
        if status:
            if status not in REPORT_STATUSES:
                raise ValidationError(f"Invalid report status: {status}")
            query["status"] = status
        return self._present(self.reports.find(query))

    def review(self, report_id, reviewer_id: str, status: Optional[str] = None, admin_notes: Optional[str] = None) -> dict:
        """Record a staff review; reviewer and time are always stamped."""
        oid = to_object_id(report_id, "Report")
        fields = {
            "reviewedBy": ObjectId(reviewer_id),
            "reviewedAt": datetime.utcnow(),
        }
        if status:
            fields["status"] = status
        if admin_notes:
            fields["adminNotes"] = admin_notes

        updated = self.reports.update(oid, fields)
        if updated is None:
            raise NotFoundError("Report not found")
        return self._present([updated])[0]

    def delete(self, report_id) -> None:
        oid = to_object_id(report_id, "Report")
        if not self.reports.delete(oid):
            raise NotFoundError("Report not found")


def get_report_service() -> ReportService:
    """Get report service instance."""
    return ReportService()
