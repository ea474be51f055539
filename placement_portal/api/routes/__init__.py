"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from placement_portal.api.routes.auth_routes import router as auth_router
from placement_portal.api.routes.user_routes import router as user_router
from placement_portal.api.routes.experience_routes import router as experience_router
from placement_portal.api.routes.comment_routes import router as comment_router, comments_router
from placement_portal.api.routes.notification_routes import router as notification_router
from placement_portal.api.routes.insights_routes import router as insights_router
from placement_portal.api.routes.announcement_routes import router as announcement_router
from placement_portal.api.routes.admin_routes import router as admin_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(experience_router)
api_router.include_router(comment_router)
api_router.include_router(comments_router)
api_router.include_router(notification_router)
api_router.include_router(insights_router)
api_router.include_router(announcement_router)
api_router.include_router(admin_router)
