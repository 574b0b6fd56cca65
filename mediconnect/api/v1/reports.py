"""
Vitals report API endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mediconnect.core.config import Settings
from mediconnect.db.session import get_db
from mediconnect.dependencies import get_current_user, get_settings
from mediconnect.schemas.report import (
    ReportListResponse, ReportResponse, UploadReportRequest
)
from mediconnect.schemas.review import ReviewListResponse
from mediconnect.schemas.user import User
from mediconnect.services.report_service import ReportService
from mediconnect.services.request_service import RequestService

router = APIRouter()


def get_report_service(
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings)
) -> ReportService:
    return ReportService(db, RequestService(db, app_settings))


@router.post("/upload", response_model=ReportResponse)
def upload_report(
    data: UploadReportRequest,
    current_user: User = Depends(get_current_user),
    report_service: ReportService = Depends(get_report_service)
):
    """Upload vitals for an accepted request (assistant)."""
    report = report_service.upload_report(current_user, data.request_id, data.medical_data)
    return ReportResponse(report=report)


@router.get("/pending", response_model=ReportListResponse)
def pending_reports(
    current_user: User = Depends(get_current_user),
    report_service: ReportService = Depends(get_report_service)
):
    """Reports awaiting review (doctor)."""
    return ReportListResponse(reports=report_service.list_pending(current_user))


@router.get("/reviewed", response_model=ReviewListResponse)
def reviewed_reports(
    current_user: User = Depends(get_current_user),
    report_service: ReportService = Depends(get_report_service)
):
    """Reviews written by the caller (doctor)."""
    return ReviewListResponse(reviews=report_service.list_reviewed(current_user))


@router.get("/my-uploads", response_model=ReportListResponse)
def my_uploads(
    current_user: User = Depends(get_current_user),
    report_service: ReportService = Depends(get_report_service)
):
    """Reports uploaded by the caller (assistant)."""
    return ReportListResponse(reports=report_service.list_my_uploads(current_user))


@router.get("/my-reviews", response_model=ReviewListResponse)
def my_reviews(
    current_user: User = Depends(get_current_user),
    report_service: ReportService = Depends(get_report_service)
):
    """Doctor reviews of the caller's reports (patient)."""
    return ReviewListResponse(reviews=report_service.my_reviews(current_user))
