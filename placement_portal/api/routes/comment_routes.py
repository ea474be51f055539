"""
Comment Routes

GET /experiences/{experience_id}/comments - All comments and replies
POST /experiences/{experience_id}/comments - Top-level comment
POST /experiences/{experience_id}/comments/{comment_id}/replies - Author reply
DELETE /comments/{comment_id} - Delete comment and its replies
"""

from fastapi import APIRouter, Depends

from placement_portal.core.auth import get_current_user
from placement_portal.services.comment_service import get_comment_service
from placement_portal.schemas.schemas import CommentCreate

router = APIRouter(prefix="/experiences/{experience_id}/comments", tags=["Comments"])
comments_router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("")
def list_comments(experience_id: str):
    comments = get_comment_service().list_for_experience(experience_id)
    return {"success": True, "count": len(comments), "data": comments}


@router.post("", status_code=201)
def create_comment(experience_id: str, data: CommentCreate, user: dict = Depends(get_current_user)):
    """Comment on an experience. The experience author gets a notification."""
    comment = get_comment_service().create_comment(experience_id, user, data.content)
    return {"success": True, "data": comment}


@router.post("/{comment_id}/replies", status_code=201)
def create_reply(experience_id: str, comment_id: str, data: CommentCreate, user: dict = Depends(get_current_user)):
    """Reply to a top-level comment. Only the experience author may reply."""
    reply = get_comment_service().create_reply(experience_id, comment_id, user, data.content)
    return {"success": True, "data": reply}


@comments_router.delete("/{comment_id}")
def delete_comment(comment_id: str, user: dict = Depends(get_current_user)):
    deleted = get_comment_service().delete_comment(comment_id, user)
    return {"success": True, "message": "Comment deleted successfully", "count": deleted}
