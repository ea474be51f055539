"""
Placement Experience Portal
Campus placement interview-experience sharing with staff moderation.

Architecture:
- MongoDB: every entity, one collection each
- FastAPI: REST API under /api
- Services: moderation, company standardization, insights, notifications
"""

__version__ = "1.0.0"
