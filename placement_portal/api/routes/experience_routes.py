"""
Experience Routes

GET /experiences - List approved experiences with filters
GET /experiences/mine - Own submissions, any moderation status
GET /experiences/{experience_id} - Get one (counts a view)
POST /experiences - Submit (anonymous allowed)
PUT /experiences/{experience_id} - Edit own submission
DELETE /experiences/{experience_id} - Delete (author or staff)
POST /experiences/{experience_id}/helpful - Upvote
POST /experiences/{experience_id}/reports - Flag for review
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from placement_portal.core.auth import get_current_user, get_optional_user
from placement_portal.services.experience_service import get_experience_service
from placement_portal.services.report_service import get_report_service
from placement_portal.schemas.schemas import ExperienceCreate, ExperienceUpdate, ReportCreate

router = APIRouter(prefix="/experiences", tags=["Experiences"])


@router.get("")
def list_experiences(
    company: Optional[str] = Query(None, description="Company name contains"),
    role: Optional[str] = Query(None, description="Role contains"),
    branch: Optional[str] = Query(None),
    year: Optional[int] = Query(None),
    search: Optional[str] = Query(None, description="Search company, role and tips")
):
    """Approved experiences only, newest first."""
    experiences = get_experience_service().list_public(company, role, branch, year, search)
    return {"success": True, "count": len(experiences), "data": experiences}


@router.get("/mine")
def my_experiences(user: dict = Depends(get_current_user)):
    experiences = get_experience_service().list_mine(user)
    return {"success": True, "count": len(experiences), "data": experiences}


@router.get("/{experience_id}")
def get_experience(experience_id: str, viewer: Optional[dict] = Depends(get_optional_user)):
    return {"success": True, "data": get_experience_service().get(experience_id, viewer)}


@router.post("", status_code=201)
def create_experience(data: ExperienceCreate, user: Optional[dict] = Depends(get_optional_user)):
    """
    Submit an interview experience. It stays pending until staff approve it.
    Send isAnonymous=true (or no token) to post without an author link.
    """
    experience = get_experience_service().create(data.model_dump(by_alias=True), user)
    return {"success": True, "data": experience}


@router.put("/{experience_id}")
def update_experience(experience_id: str, data: ExperienceUpdate, user: dict = Depends(get_current_user)):
    """Update own experience. Only provided fields are updated."""
    experience = get_experience_service().update_by_author(experience_id, user, data.to_document())
    return {"success": True, "data": experience}


@router.delete("/{experience_id}")
def delete_experience(experience_id: str, user: dict = Depends(get_current_user)):
    """Delete an experience with its comments and reports."""
    result = get_experience_service().delete(experience_id, user)
    return {"success": True, "message": "Experience deleted successfully", "data": result}


@router.post("/{experience_id}/helpful")
def mark_helpful(experience_id: str):
    return {"success": True, "data": get_experience_service().mark_helpful(experience_id)}


@router.post("/{experience_id}/reports", status_code=201)
def report_experience(experience_id: str, data: ReportCreate, user: Optional[dict] = Depends(get_optional_user)):
    report = get_report_service().create(experience_id, data.reason, data.description, user)
    return {"success": True, "data": report}
