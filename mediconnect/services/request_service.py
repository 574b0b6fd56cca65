"""
Request lifecycle: sent -> accepted -> completed, or sent -> cancelled.
"""
from typing import List
from sqlalchemy.orm import Session

from mediconnect.core.config import Settings, settings as default_settings
from mediconnect.core.exceptions import (
    InvalidTransitionError, NotFoundError, ValidationError
)
from mediconnect.core.logging import get_logger
from mediconnect.core.permissions import require_owner, require_role
from mediconnect.db.kv_store import REQUEST_PREFIX, USER_PREFIX, KVStore, new_key
from mediconnect.schemas.audit import AuditAction
from mediconnect.schemas.base import utcnow
from mediconnect.schemas.request import RequestStatus, ServiceRequest
from mediconnect.schemas.user import Role, User
from mediconnect.services.audit_service import AuditService

logger = get_logger(__name__)


class RequestService:
    """Service for creating and transitioning visit requests."""

    def __init__(self, db: Session, settings: Settings = default_settings):
        self.store = KVStore(db)
        self.audit = AuditService(db)
        self.settings = settings

    def get_request(self, request_id: str) -> ServiceRequest:
        """Get request by id or raise NotFoundError."""
        document = self.store.get(request_id) if request_id.startswith(REQUEST_PREFIX) else None
        if document is None:
            raise NotFoundError("Request not found")
        return ServiceRequest.from_document(document)

    def save_request(self, request: ServiceRequest) -> ServiceRequest:
        self.store.set(request.id, request.to_document())
        return request

    def _all_requests(self) -> List[ServiceRequest]:
        requests = [ServiceRequest.from_document(doc) for doc in self.store.get_by_prefix(REQUEST_PREFIX)]
        requests.sort(key=lambda r: r.created_at, reverse=True)
        return requests

    def send(self, caller: User, assistant_id: str) -> ServiceRequest:
        """Create a request from the calling patient to an assistant."""
        require_role(caller, Role.PATIENT, message="Only patients can send requests")

        assistant_doc = self.store.get(f"{USER_PREFIX}{assistant_id}")
        if not assistant_doc or assistant_doc.get("role") != Role.ASSISTANT.value:
            raise NotFoundError("Assistant not found")
        assistant = User.from_document(assistant_doc)

        request = self.save_request(ServiceRequest(
            id=new_key(REQUEST_PREFIX),
            patient_id=caller.id,
            patient_name=caller.name,
            assistant_id=assistant.id,
            assistant_name=assistant.name,
            status=RequestStatus.SENT,
            created_at=utcnow()
        ))

        self.audit.record(
            AuditAction.SEND_REQUEST, caller.id,
            target_id=request.id,
            metadata={"requestId": request.id, "assistantId": assistant.id}
        )
        return request

    def accept(self, caller: User, request_id: str, scheduled_date: str) -> ServiceRequest:
        """Accept a sent request addressed to the calling assistant."""
        require_role(caller, Role.ASSISTANT, message="Only assistants can accept requests")
        request = self.get_request(request_id)
        require_owner(caller, request.assistant_id, "Not authorized to accept this request")

        if request.status != RequestStatus.SENT:
            raise InvalidTransitionError(f"Cannot accept a request that is {request.status.value}")
        if not scheduled_date or not scheduled_date.strip():
            raise ValidationError("Scheduled date is required")

        request.status = RequestStatus.ACCEPTED
        request.scheduled_date = scheduled_date.strip()
        request.accepted_at = utcnow()
        self.save_request(request)

        self.audit.record(
            AuditAction.ACCEPT_REQUEST, caller.id,
            target_id=request.id,
            metadata={"requestId": request.id, "scheduledDate": request.scheduled_date}
        )
        return request

    def cancel(self, caller: User, request_id: str) -> ServiceRequest:
        """Cancel a request owned by the calling patient.

        Only requests still in ``sent`` can be cancelled unless
        ``CANCEL_REQUIRES_SENT_STATUS`` is turned off, in which case any
        status is overwritten.
        """
        require_role(caller, Role.PATIENT, message="Only patients can cancel requests")
        request = self.get_request(request_id)
        require_owner(caller, request.patient_id, "Not authorized to cancel this request")

        if self.settings.CANCEL_REQUIRES_SENT_STATUS and request.status != RequestStatus.SENT:
            raise InvalidTransitionError(f"Cannot cancel a request that is {request.status.value}")

        request.status = RequestStatus.CANCELLED
        request.cancelled_at = utcnow()
        self.save_request(request)

        self.audit.record(
            AuditAction.CANCEL_REQUEST, caller.id,
            target_id=request.id,
            metadata={"requestId": request.id}
        )
        return request

    def complete(self, request: ServiceRequest) -> ServiceRequest:
        """Mark an accepted request completed. Called when its report is uploaded."""
        if request.status != RequestStatus.ACCEPTED:
            raise InvalidTransitionError(f"Cannot complete a request that is {request.status.value}")

        request.status = RequestStatus.COMPLETED
        request.completed_at = utcnow()
        return self.save_request(request)

    def my_requests(self, caller: User) -> List[ServiceRequest]:
        """Requests sent by the calling patient, newest first."""
        require_role(caller, Role.PATIENT, message="Only patients can view their requests")
        return [r for r in self._all_requests() if r.patient_id == caller.id]

    def for_assistant(self, caller: User) -> List[ServiceRequest]:
        """Requests addressed to the calling assistant, newest first."""
        require_role(caller, Role.ASSISTANT, message="Only assistants can view assigned requests")
        return [r for r in self._all_requests() if r.assistant_id == caller.id]
