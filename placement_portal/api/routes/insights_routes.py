"""
Insights Routes (public)

GET /insights - Overview stats, frequent questions, distributions
GET /insights/questions - Questions filtered by company/role with difficulty
"""

from typing import Optional

from fastapi import APIRouter, Query

from placement_portal.services.insights_service import get_insights_service

router = APIRouter(prefix="/insights", tags=["Insights"])


@router.get("")
def get_insights():
    """Computed on every request over all experiences."""
    return {"success": True, "data": get_insights_service().get_insights()}


@router.get("/questions")
def search_questions(
    company: Optional[str] = Query(None, description="Company name contains"),
    role: Optional[str] = Query(None, description="Role contains")
):
    result = get_insights_service().search_questions(company, role)
    return {"success": True, "count": result["total"], "data": result}
