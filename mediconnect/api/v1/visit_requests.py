"""
Visit request API endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mediconnect.core.config import Settings
from mediconnect.db.session import get_db
from mediconnect.dependencies import get_current_user, get_settings
from mediconnect.schemas.request import (
    AcceptRequest, CancelRequest, RequestListResponse, RequestResponse,
    SendRequest
)
from mediconnect.schemas.user import User
from mediconnect.services.request_service import RequestService

router = APIRouter()


@router.post("/send", response_model=RequestResponse)
def send_request(
    data: SendRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings)
):
    """Send a visit request to an assistant (patient)."""
    request = RequestService(db, app_settings).send(current_user, data.assistant_id)
    return RequestResponse(request=request)


@router.get("/my-requests", response_model=RequestListResponse)
def my_requests(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings)
):
    """Requests sent by the caller (patient)."""
    return RequestListResponse(requests=RequestService(db, app_settings).my_requests(current_user))


@router.get("/for-assistant", response_model=RequestListResponse)
def requests_for_assistant(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings)
):
    """Requests addressed to the caller (assistant)."""
    return RequestListResponse(requests=RequestService(db, app_settings).for_assistant(current_user))


@router.post("/accept", response_model=RequestResponse)
def accept_request(
    data: AcceptRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings)
):
    """Accept a request and schedule the visit (assistant)."""
    request = RequestService(db, app_settings).accept(current_user, data.request_id, data.scheduled_date)
    return RequestResponse(request=request)


@router.post("/cancel", response_model=RequestResponse)
def cancel_request(
    data: CancelRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings)
):
    """Cancel one of the caller's requests (patient)."""
    request = RequestService(db, app_settings).cancel(current_user, data.request_id)
    return RequestResponse(request=request)
