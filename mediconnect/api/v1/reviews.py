"""
Doctor review API endpoints.
"""
from fastapi import APIRouter, Depends

from mediconnect.api.v1.reports import get_report_service
from mediconnect.dependencies import get_current_user
from mediconnect.schemas.review import ReviewCreate, ReviewResponse
from mediconnect.schemas.user import User
from mediconnect.services.report_service import ReportService

router = APIRouter()


@router.post("/create", response_model=ReviewResponse)
def create_review(
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    report_service: ReportService = Depends(get_report_service)
):
    """Review a pending report (doctor)."""
    review = report_service.create_review(current_user, data)
    return ReviewResponse(review=review)
