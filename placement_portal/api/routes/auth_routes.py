"""
Authentication Routes

POST /auth/register - Register new user (returns token)
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

from fastapi import APIRouter, Depends

from placement_portal.core.auth import get_current_user
from placement_portal.services.user_service import get_user_service
from placement_portal.schemas.schemas import RegisterRequest, LoginRequest

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", status_code=201)
def register(request: RegisterRequest):
    """
    Register a new student or alumni account.

    Include the returned token in requests: Authorization: Bearer <token>
    """
    token, user = get_user_service().register(request.model_dump(by_alias=True))
    return {"success": True, "token": token, "user": user}


@router.post("/login")
def login(request: LoginRequest):
    """Login and receive JWT access token."""
    token, user = get_user_service().login(request.email, request.password)
    return {"success": True, "token": token, "user": user}


@router.get("/me")
def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return {"success": True, "user": get_user_service().get_profile(user["user_id"])}
