"""
Vitals reports and doctor reviews.
"""
from typing import List
from sqlalchemy.orm import Session

from mediconnect.core.exceptions import (
    InvalidTransitionError, NotFoundError, ValidationError
)
from mediconnect.core.logging import get_logger
from mediconnect.core.permissions import require_owner, require_role
from mediconnect.db.kv_store import REPORT_PREFIX, REVIEW_PREFIX, KVStore, new_key
from mediconnect.schemas.audit import AuditAction
from mediconnect.schemas.base import utcnow
from mediconnect.schemas.report import MedicalData, Report, ReportStatus
from mediconnect.schemas.request import RequestStatus
from mediconnect.schemas.review import Review, ReviewCreate
from mediconnect.schemas.user import Role, User
from mediconnect.services.audit_service import AuditService
from mediconnect.services.request_service import RequestService

logger = get_logger(__name__)

REQUIRED_VITALS = {
    "blood_pressure": "bloodPressure",
    "blood_sugar": "bloodSugar",
    "heart_rate": "heartRate",
}


def validate_medical_data(medical_data: MedicalData) -> None:
    """Ensure blood pressure, blood sugar and heart rate are present."""
    missing = [
        label for field, label in REQUIRED_VITALS.items()
        if not (getattr(medical_data, field) or "").strip()
    ]
    if missing:
        raise ValidationError(f"Missing required medical data: {', '.join(missing)}")


class ReportService:
    """Service for report upload and review."""

    def __init__(self, db: Session, request_service: RequestService = None):
        self.store = KVStore(db)
        self.audit = AuditService(db)
        self.requests = request_service or RequestService(db)

    def get_report(self, report_id: str) -> Report:
        """Get report by id or raise NotFoundError."""
        document = self.store.get(report_id) if report_id.startswith(REPORT_PREFIX) else None
        if document is None:
            raise NotFoundError("Report not found")
        return Report.from_document(document)

    def _all_reports(self) -> List[Report]:
        reports = [Report.from_document(doc) for doc in self.store.get_by_prefix(REPORT_PREFIX)]
        reports.sort(key=lambda r: r.uploaded_at, reverse=True)
        return reports

    def _all_reviews(self) -> List[Review]:
        reviews = [Review.from_document(doc) for doc in self.store.get_by_prefix(REVIEW_PREFIX)]
        reviews.sort(key=lambda r: r.created_at, reverse=True)
        return reviews

    def upload_report(self, caller: User, request_id: str, medical_data: MedicalData) -> Report:
        """Record vitals for an accepted request and complete the request.

        The request is completed before the report is written; a failure in
        between leaves a completed request without a report.
        """
        require_role(caller, Role.ASSISTANT, message="Only assistants can upload reports")
        request = self.requests.get_request(request_id)
        require_owner(caller, request.assistant_id, "Not authorized to upload report for this request")

        if request.status != RequestStatus.ACCEPTED:
            raise InvalidTransitionError(
                f"Cannot upload a report for a request that is {request.status.value}"
            )
        validate_medical_data(medical_data)

        self.requests.complete(request)

        report = Report(
            id=new_key(REPORT_PREFIX),
            request_id=request.id,
            patient_id=request.patient_id,
            patient_name=request.patient_name,
            assistant_id=caller.id,
            assistant_name=caller.name,
            status=ReportStatus.PENDING,
            medical_data=medical_data,
            uploaded_at=utcnow()
        )
        self.store.set(report.id, report.to_document())

        self.audit.record(
            AuditAction.UPLOAD_REPORT, caller.id,
            target_id=report.id,
            metadata={"reportId": report.id, "requestId": request.id}
        )
        return report

    def list_pending(self, caller: User) -> List[Report]:
        """Reports awaiting review (doctor only)."""
        require_role(caller, Role.DOCTOR, message="Only doctors can view reports")
        return [r for r in self._all_reports() if r.status == ReportStatus.PENDING]

    def list_reviewed(self, caller: User) -> List[Review]:
        """Reviews written by the calling doctor."""
        require_role(caller, Role.DOCTOR, message="Only doctors can view reports")
        return [r for r in self._all_reviews() if r.doctor_id == caller.id]

    def list_my_uploads(self, caller: User) -> List[Report]:
        """Reports uploaded by the calling assistant, any status."""
        require_role(caller, Role.ASSISTANT, message="Only assistants can view their uploads")
        return [r for r in self._all_reports() if r.assistant_id == caller.id]

    def my_reviews(self, caller: User) -> List[Review]:
        """Reviews of the calling patient's reports."""
        require_role(caller, Role.PATIENT, message="Only patients can view their reports")
        return [r for r in self._all_reviews() if r.patient_id == caller.id]

    def create_review(self, caller: User, data: ReviewCreate) -> Review:
        """Review a pending report; the report becomes reviewed."""
        require_role(caller, Role.DOCTOR, message="Only doctors can create reviews")
        report = self.get_report(data.report_id)

        diagnosis = (data.diagnosis or "").strip()
        if not diagnosis:
            raise ValidationError("Diagnosis is required")
        if report.status != ReportStatus.PENDING:
            raise InvalidTransitionError("Report has already been reviewed")

        report.status = ReportStatus.REVIEWED
        report.reviewed_at = utcnow()
        report.reviewed_by = caller.id
        self.store.set(report.id, report.to_document())

        review = Review(
            id=new_key(REVIEW_PREFIX),
            report_id=report.id,
            patient_id=report.patient_id,
            patient_name=report.patient_name,
            doctor_id=caller.id,
            doctor_name=caller.name,
            diagnosis=diagnosis,
            prescription=data.prescription or None,
            advice=data.advice or None,
            created_at=utcnow()
        )
        self.store.set(review.id, review.to_document())

        self.audit.record(
            AuditAction.CREATE_REVIEW, caller.id,
            target_id=review.id,
            metadata={"reviewId": review.id, "reportId": report.id}
        )
        return review
