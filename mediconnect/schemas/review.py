"""
Doctor review schemas.
"""
from datetime import datetime
from typing import List, Optional

from mediconnect.schemas.base import CamelModel, SuccessResponse


class Review(CamelModel):
    """A doctor's write-up for one report. Immutable once created."""
    id: str
    report_id: str
    patient_id: str
    patient_name: str
    doctor_id: str
    doctor_name: str
    diagnosis: str
    prescription: Optional[str] = None
    advice: Optional[str] = None
    created_at: datetime


class ReviewCreate(CamelModel):
    report_id: str
    diagnosis: Optional[str] = None
    prescription: Optional[str] = None
    advice: Optional[str] = None


class ReviewResponse(SuccessResponse):
    review: Review


class ReviewListResponse(CamelModel):
    reviews: List[Review]
