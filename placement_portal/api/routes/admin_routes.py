"""
Admin Routes (staff only unless noted)

Moderation:
    GET /admin/experiences/pending
    GET /admin/experiences?status=
    PUT /admin/experiences/{id}/approve
    PUT /admin/experiences/{id}/reject
    PUT /admin/experiences/{id}
    DELETE /admin/experiences/{id}
    POST /admin/experiences/reset-moderation   (admin role only)
Company standardization:
    GET /admin/companies/all
    GET|POST /admin/companies
    PUT|DELETE /admin/companies/{id}
    POST /admin/companies/standardize
Reports:
    GET /admin/reports?status=
    PUT /admin/reports/{id}/review
    DELETE /admin/reports/{id}
Announcements:
    GET|POST /admin/announcements
    PUT|DELETE /admin/announcements/{id}
Dashboard / users:
    GET /admin/stats
    GET /admin/users
    GET /admin/users/filters
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from placement_portal.core.auth import get_current_admin, get_current_staff
from placement_portal.services.announcement_service import get_announcement_service
from placement_portal.services.company_service import get_company_service
from placement_portal.services.moderation_service import get_moderation_service
from placement_portal.services.report_service import get_report_service
from placement_portal.services.user_service import get_user_service
from placement_portal.schemas.schemas import (
    AdminExperienceUpdate, AnnouncementCreate, AnnouncementUpdate, CompanyStandardCreate,
    CompanyStandardUpdate, ModerationRequest, ReportReview, StandardizeRequest
)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(get_current_staff)])


# ============================================================
# MODERATION
# ============================================================

@router.get("/experiences/pending")
def pending_experiences():
    experiences = get_moderation_service().list_pending()
    return {"success": True, "count": len(experiences), "data": experiences}


@router.get("/experiences")
def all_experiences(status: Optional[str] = Query(None, description="pending | approved | rejected")):
    experiences = get_moderation_service().list_experiences(status)
    return {"success": True, "count": len(experiences), "data": experiences}


@router.post("/experiences/reset-moderation")
def reset_moderation(admin: dict = Depends(get_current_admin)):
    """
    Send every approved/rejected experience back to pending.
    One-off recovery tool; cannot be undone.
    """
    modified = get_moderation_service().reset_all()
    return {
        "success": True,
        "message": f"Reset {modified} experiences to pending status",
        "modifiedCount": modified,
    }


@router.put("/experiences/{experience_id}/approve")
def approve_experience(
    experience_id: str,
    body: Optional[ModerationRequest] = None,
    staff: dict = Depends(get_current_staff)
):
    notes = body.notes if body else None
    experience = get_moderation_service().approve(experience_id, staff["user_id"], notes)
    return {"success": True, "data": experience}


@router.put("/experiences/{experience_id}/reject")
def reject_experience(
    experience_id: str,
    body: Optional[ModerationRequest] = None,
    staff: dict = Depends(get_current_staff)
):
    notes = body.notes if body else None
    experience = get_moderation_service().reject(experience_id, staff["user_id"], notes)
    return {"success": True, "data": experience}


@router.put("/experiences/{experience_id}")
def edit_experience(experience_id: str, data: AdminExperienceUpdate):
    experience = get_moderation_service().update_experience(experience_id, data.to_document())
    return {"success": True, "data": experience}


@router.delete("/experiences/{experience_id}")
def delete_experience(experience_id: str):
    result = get_moderation_service().delete_experience(experience_id)
    return {"success": True, "message": "Experience deleted successfully", "data": result}


# ============================================================
# COMPANY STANDARDIZATION
# ============================================================

@router.get("/companies/all")
def all_company_names():
    """Distinct company names in use, most used first."""
    companies = get_company_service().list_distinct_companies()
    return {"success": True, "count": len(companies), "data": companies}


@router.get("/companies")
def list_standardizations():
    standards = get_company_service().list_standards()
    return {"success": True, "count": len(standards), "data": standards}


@router.post("/companies", status_code=201)
def create_standardization(data: CompanyStandardCreate, staff: dict = Depends(get_current_staff)):
    standard = get_company_service().create_standard(data.standard_name, data.variations, staff["user_id"])
    return {"success": True, "data": standard}


@router.post("/companies/standardize")
def standardize_company(data: StandardizeRequest):
    """Rewrite a single experience's company name."""
    experience = get_company_service().standardize_experience(data.experience_id, data.standard_name)
    return {"success": True, "data": experience}


@router.put("/companies/{standard_id}")
def update_standardization(standard_id: str, data: CompanyStandardUpdate, staff: dict = Depends(get_current_staff)):
    standard = get_company_service().update_standard(
        standard_id, data.standard_name, data.variations, staff["user_id"]
    )
    return {"success": True, "data": standard}


@router.delete("/companies/{standard_id}")
def delete_standardization(standard_id: str):
    get_company_service().delete_standard(standard_id)
    return {"success": True, "message": "Company standardization deleted successfully"}


# ============================================================
# REPORTS
# ============================================================

@router.get("/reports")
def list_reports(status: Optional[str] = Query(None)):
    reports = get_report_service().list_reports(status)
    return {"success": True, "count": len(reports), "data": reports}


@router.put("/reports/{report_id}/review")
def review_report(report_id: str, data: ReportReview, staff: dict = Depends(get_current_staff)):
    report = get_report_service().review(report_id, staff["user_id"], data.status, data.admin_notes)
    return {"success": True, "data": report}


@router.delete("/reports/{report_id}")
def delete_report(report_id: str):
    get_report_service().delete(report_id)
    return {"success": True, "message": "Report deleted successfully"}


# ============================================================
# ANNOUNCEMENTS
# ============================================================

@router.get("/announcements")
def list_announcements():
    announcements = get_announcement_service().list_all()
    return {"success": True, "count": len(announcements), "data": announcements}


@router.post("/announcements", status_code=201)
def create_announcement(data: AnnouncementCreate, staff: dict = Depends(get_current_staff)):
    announcement = get_announcement_service().create(data.model_dump(by_alias=True), staff["user_id"])
    return {"success": True, "data": announcement}


@router.put("/announcements/{announcement_id}")
def update_announcement(announcement_id: str, data: AnnouncementUpdate):
    announcement = get_announcement_service().update(announcement_id, data.to_document())
    return {"success": True, "data": announcement}


@router.delete("/announcements/{announcement_id}")
def delete_announcement(announcement_id: str):
    get_announcement_service().delete(announcement_id)
    return {"success": True, "message": "Announcement deleted successfully"}


# ============================================================
# STATS / USERS
# ============================================================

@router.get("/stats")
def admin_stats():
    return {"success": True, "data": get_moderation_service().stats()}


@router.get("/users")
def list_users(
    branch: Optional[str] = Query(None),
    graduation_year: Optional[int] = Query(None, alias="graduationYear"),
    role: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Matches name, username or email")
):
    users = get_user_service().list_users(branch, graduation_year, role, search)
    return {"success": True, "count": len(users), "data": users}


@router.get("/users/filters")
def user_filters():
    return {"success": True, "data": get_user_service().user_filters()}
