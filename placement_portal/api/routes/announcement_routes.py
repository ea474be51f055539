"""
Announcement Routes (public)

GET /announcements - Active, unexpired announcements
GET /announcements/{announcement_id} - One announcement (counts a view)
"""

from fastapi import APIRouter

from placement_portal.services.announcement_service import get_announcement_service

router = APIRouter(prefix="/announcements", tags=["Announcements"])


@router.get("")
def list_announcements():
    announcements = get_announcement_service().list_active()
    return {"success": True, "count": len(announcements), "data": announcements}


@router.get("/{announcement_id}")
def get_announcement(announcement_id: str):
    return {"success": True, "data": get_announcement_service().view(announcement_id)}
