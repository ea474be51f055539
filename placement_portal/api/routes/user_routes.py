"""
User Routes

GET /users/profile - Get own profile
PUT /users/profile - Update own profile (partial)
GET /users/{username} - Public profile with approved experiences
"""

from fastapi import APIRouter, Depends

from placement_portal.core.auth import get_current_user
from placement_portal.services.user_service import get_user_service
from placement_portal.schemas.schemas import ProfileUpdate

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/profile")
def get_profile(user: dict = Depends(get_current_user)):
    return {"success": True, "user": get_user_service().get_profile(user["user_id"])}


@router.put("/profile")
def update_profile(data: ProfileUpdate, user: dict = Depends(get_current_user)):
    """Update profile. Only provided fields are updated."""
    updated = get_user_service().update_profile(user["user_id"], data.to_document())
    return {"success": True, "user": updated}


@router.get("/{username}")
def get_public_profile(username: str):
    result = get_user_service().get_public_profile(username)
    return {"success": True, **result}
