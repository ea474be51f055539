"""
Placement Experience Portal - Main Application

FastAPI backend with:
- MongoDB for every entity (experiences, comments, reports, ...)
- JWT authentication
- Moderation, company standardization and insights for staff

Run: uvicorn placement_portal.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from placement_portal.api.routes import api_router
from placement_portal.core.config import get_settings
from placement_portal.core.exceptions import PortalError, UnclassifiedError
from placement_portal.core.logging import setup_logging
from placement_portal.db.mongodb import close_mongo_connection, init_mongo_indexes, test_mongo_connection

settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Placement Experience Portal",
    description="""
    Share and browse campus placement interview experiences.

    ## Features
    - **Authentication**: JWT-based auth for students and alumni
    - **Experiences**: Submit rounds, questions and tips; browse approved ones
    - **Comments**: Threaded discussion with author replies and notifications
    - **Moderation**: Staff approve/reject submissions and review reports
    - **Companies**: Canonical company names for consistent filtering
    - **Insights**: Frequent questions, package stats, distributions
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


# ============================================================
# ERROR ENVELOPE: {"success": false, "error": "..."}
# ============================================================

@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()) if p != 'body')}: {e.get('msg')}" for e in errors
    ) or "Invalid request"
    return JSONResponse(status_code=400, content={"success": False, "error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = UnclassifiedError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes and the optional bootstrap admin."""
    from placement_portal.services.user_service import get_user_service

    try:
        init_mongo_indexes()
        get_user_service().ensure_bootstrap_admin()
    except Exception:
        logger.exception("MongoDB startup initialization failed")


@app.on_event("shutdown")
def shutdown_event():
    close_mongo_connection()


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Placement Experience Portal"}


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
