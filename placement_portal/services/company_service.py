"""
Company Standardization Service

Users type company names freely ("Google", "google", "Google India").
Staff keep a list of canonical names with known variations and rewrite
experiences one at a time.

The variations list is reference data for the moderator only: nothing here
matches names automatically, and standardize_experience() writes whatever
name it is given.
"""

import logging
from typing import Optional, List

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from placement_portal.core.exceptions import ConflictError, NotFoundError, ValidationError
from placement_portal.services.experience_service import ExperienceService
from placement_portal.services.mongo_service import (
    CompanyStandardizationStore,
    ExperienceStore,
    UserStore,
    serialize_docs,
    to_object_id,
)

logger = logging.getLogger(__name__)

EDITOR_FIELDS = ("name", "username")


class CompanyStandardizationService:
    """CRUD for canonical names plus the per-experience rename."""

    def __init__(self):
        self.standards = CompanyStandardizationStore()
        self.experiences = ExperienceStore()
        self.users = UserStore()

    def _present(self, docs: List[dict]) -> List[dict]:
        self.users.populate(docs, "createdBy", EDITOR_FIELDS)
        self.users.populate(docs, "updatedBy", EDITOR_FIELDS)
        return serialize_docs(docs)

    def _get_or_404(self, standard_id) -> dict:
        oid = to_object_id(standard_id, "Company standardization")
        doc = self.standards.get_by_id(oid)
        if not doc:
            raise NotFoundError("Company standardization not found")
        return doc

    def list_standards(self) -> List[dict]:
        """All canonical names, alphabetical."""
        return self._present(self.standards.find())

    def create_standard(self, standard_name: Optional[str], variations: Optional[List[str]], created_by: str) -> dict:
        """
        Add a canonical name. Variations are stored exactly as given
        (duplicates included).
        """
        name = (standard_name or "").strip()
        if not name:
            raise ValidationError("Standard company name is required")
        if self.standards.get_by_name(name):
            raise ConflictError(f"Company standardization '{name}' already exists")

        doc = {
            "standardName": name,
            "variations": list(variations or []),
            "createdBy": ObjectId(created_by),
            "updatedBy": None,
        }
        try:
            oid = self.standards.insert(doc)
        except DuplicateKeyError:
            raise ConflictError(f"Company standardization '{name}' already exists")

        logger.info("Company standardization created: %s", name)
        return self._present([self.standards.get_by_id(oid)])[0]

    def update_standard(
        self,
        standard_id,
        standard_name: Optional[str] = None,
        variations: Optional[List[str]] = None,
        updated_by: Optional[str] = None
    ) -> dict:
        """Partial update; a given variations list replaces the old one."""
        doc = self._get_or_404(standard_id)
        fields = {}

        if standard_name is not None:
            name = standard_name.strip()
            if not name:
                raise ValidationError("Standard company name cannot be empty")
            existing = self.standards.get_by_name(name)
            if existing and existing["_id"] != doc["_id"]:
                raise ConflictError(f"Company standardization '{name}' already exists")
            fields["standardName"] = name
        if variations is not None:
            fields["variations"] = list(variations)
        if updated_by:
            fields["updatedBy"] = ObjectId(updated_by)

        try:
            updated = self.standards.update(doc["_id"], fields)
        except DuplicateKeyError:
            raise ConflictError(f"Company standardization '{fields.get('standardName')}' already exists")
        if updated is None:
            raise NotFoundError("Company standardization not found")
        return self._present([updated])[0]

    def delete_standard(self, standard_id) -> None:
        doc = self._get_or_404(standard_id)
        self.standards.delete(doc["_id"])
        logger.info("Company standardization deleted: %s", doc.get("standardName"))

    def standardize_experience(self, experience_id: Optional[str], standard_name: Optional[str]) -> dict:
        """
        Overwrite one experience's company with standard_name.
        There is no bulk variant; callers repeat this per experience.
        """
        if not experience_id or not standard_name:
            raise ValidationError("Experience ID and standard name are required")

        oid = to_object_id(experience_id, "Experience")
        before = self.experiences.get_by_id(oid, {"company": 1})
        updated = self.experiences.update(oid, {"company": standard_name})
        if updated is None:
            raise NotFoundError("Experience not found")

        logger.info(
            "Experience %s company standardized: %r -> %r",
            oid, (before or {}).get("company"), standard_name
        )
        return ExperienceService().present_one(updated)

    def list_distinct_companies(self) -> List[dict]:
        """
        Every company string in use with its count.
        Sorted by count descending, then name by code point (case-sensitive).
        """
        companies = []
        for name in self.experiences.distinct("company"):
            if name is None:
                continue
            companies.append({
                "name": name,
                "count": self.experiences.count({"company": name}),
            })
        companies.sort(key=lambda c: (-c["count"], c["name"]))
        return companies


def get_company_service() -> CompanyStandardizationService:
    """Get company standardization service instance."""
    return CompanyStandardizationService()
