"""
Vitals report schemas.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from mediconnect.schemas.base import CamelModel, SuccessResponse


class ReportStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"


class MedicalData(CamelModel):
    """Vitals captured during a visit, free text at this layer."""
    blood_pressure: Optional[str] = None
    blood_sugar: Optional[str] = None
    heart_rate: Optional[str] = None
    temperature: Optional[str] = None
    notes: Optional[str] = None


class Report(CamelModel):
    id: str
    request_id: str
    patient_id: str
    patient_name: str
    assistant_id: str
    assistant_name: str
    status: ReportStatus
    medical_data: MedicalData
    uploaded_at: datetime

    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None


class UploadReportRequest(CamelModel):
    request_id: str
    medical_data: MedicalData


class ReportResponse(SuccessResponse):
    report: Report


class ReportListResponse(CamelModel):
    reports: List[Report]
