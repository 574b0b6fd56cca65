"""
Visit request schemas.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from mediconnect.schemas.base import CamelModel, SuccessResponse


class RequestStatus(str, Enum):
    SENT = "sent"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ServiceRequest(CamelModel):
    """A patient's ask for an in-person visit from one assistant.

    Names are copied from the user records at creation time and are not
    refreshed when a profile changes later.
    """
    id: str
    patient_id: str
    patient_name: str
    assistant_id: str
    assistant_name: str
    status: RequestStatus
    created_at: datetime

    scheduled_date: Optional[str] = None
    accepted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None


class SendRequest(CamelModel):
    assistant_id: str


class AcceptRequest(CamelModel):
    request_id: str
    scheduled_date: Optional[str] = None


class CancelRequest(CamelModel):
    request_id: str


class RequestResponse(SuccessResponse):
    request: ServiceRequest


class RequestListResponse(CamelModel):
    requests: List[ServiceRequest]
