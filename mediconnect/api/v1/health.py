"""
Health check API endpoints.
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mediconnect.core.config import settings
from mediconnect.db.session import get_db

router = APIRouter()


@router.get("/")
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.VERSION
    }


@router.get("/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """Detailed health check including store connectivity."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.VERSION,
        "services": {}
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["services"]["database"] = {
            "status": "healthy",
            "type": db.get_bind().dialect.name
        }
    except SQLAlchemyError as e:
        health_status["status"] = "unhealthy"
        health_status["services"]["database"] = {
            "status": "unhealthy",
            "error": str(e)
        }

    health_status["services"]["storage"] = {
        "status": "configured",
        "type": "s3" if settings.USE_S3 else "local"
    }

    if health_status["status"] != "healthy":
        return JSONResponse(status_code=503, content=health_status)
    return health_status
