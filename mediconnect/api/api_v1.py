"""
API router configuration - combines all API endpoints.
"""
from fastapi import APIRouter
from mediconnect.api.v1 import (
    assistants, audit, auth, documents, health, profile, reports, reviews,
    users, visit_requests
)

# Create main API router
api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(assistants.router, prefix="/assistants", tags=["assistants"])
api_router.include_router(visit_requests.router, prefix="/requests", tags=["requests"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
api_router.include_router(audit.router, prefix="/audit", tags=["audit"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(profile.router, prefix="/settings", tags=["settings"])
api_router.include_router(health.router, prefix="/health", tags=["health"])


@api_router.get("/")
async def api_root():
    """API root endpoint."""
    return {
        "message": "MediConnect API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health/",
        "status": "operational"
    }
