import pytest

from mediconnect.core.config import Settings
from mediconnect.core.exceptions import (
    ForbiddenError, InvalidTransitionError, NotFoundError, ValidationError
)
from mediconnect.schemas.request import RequestStatus
from mediconnect.services.request_service import RequestService


@pytest.fixture
def requests(db, test_settings):
    return RequestService(db, test_settings)


@pytest.fixture
def patient(make_record):
    return make_record("patient", name="Pat Patient")


@pytest.fixture
def assistant(make_record):
    return make_record("assistant", name="Ann Assistant", area="Lahore")


def test_send_creates_request_in_sent_state(requests, patient, assistant):
    request = requests.send(patient, assistant.id)

    assert request.status == RequestStatus.SENT
    assert request.patient_id == patient.id
    assert request.patient_name == "Pat Patient"
    assert request.assistant_id == assistant.id
    assert request.assistant_name == "Ann Assistant"
    assert request.id.startswith("req:")
    assert requests.get_request(request.id) == request


@pytest.mark.parametrize("role", ["assistant", "doctor", "admin"])
def test_only_patients_can_send(requests, make_record, assistant, role):
    caller = make_record(role)

    with pytest.raises(ForbiddenError):
        requests.send(caller, assistant.id)


def test_send_requires_existing_assistant(requests, patient, make_record):
    doctor = make_record("doctor")

    with pytest.raises(NotFoundError):
        requests.send(patient, "missing-id")
    with pytest.raises(NotFoundError):
        requests.send(patient, doctor.id)


def test_accept_sets_schedule(requests, patient, assistant):
    request = requests.send(patient, assistant.id)

    accepted = requests.accept(assistant, request.id, "2025-12-01T10:00")

    assert accepted.status == RequestStatus.ACCEPTED
    assert accepted.scheduled_date == "2025-12-01T10:00"
    assert accepted.accepted_at is not None
    assert requests.get_request(request.id).status == RequestStatus.ACCEPTED


def test_accept_by_other_assistant_is_forbidden(requests, patient, assistant, make_record):
    other = make_record("assistant")
    request = requests.send(patient, assistant.id)

    with pytest.raises(ForbiddenError):
        requests.accept(other, request.id, "2025-12-01T10:00")
    assert requests.get_request(request.id).status == RequestStatus.SENT


def test_accept_twice_is_rejected(requests, patient, assistant):
    request = requests.send(patient, assistant.id)
    requests.accept(assistant, request.id, "2025-12-01T10:00")

    with pytest.raises(InvalidTransitionError):
        requests.accept(assistant, request.id, "2025-12-02T09:00")
    assert requests.get_request(request.id).scheduled_date == "2025-12-01T10:00"


def test_accept_requires_scheduled_date(requests, patient, assistant):
    request = requests.send(patient, assistant.id)

    with pytest.raises(ValidationError):
        requests.accept(assistant, request.id, "  ")


def test_accept_unknown_request(requests, assistant):
    with pytest.raises(NotFoundError):
        requests.accept(assistant, "req:0:missing", "2025-12-01T10:00")


def test_cancel_by_owner(requests, patient, assistant):
    request = requests.send(patient, assistant.id)

    cancelled = requests.cancel(patient, request.id)

    assert cancelled.status == RequestStatus.CANCELLED
    assert cancelled.cancelled_at is not None


def test_cancel_by_other_patient_is_forbidden(requests, patient, assistant, make_record):
    request = requests.send(patient, assistant.id)

    with pytest.raises(ForbiddenError):
        requests.cancel(make_record("patient"), request.id)


def test_cancel_after_accept_is_rejected(requests, patient, assistant):
    request = requests.send(patient, assistant.id)
    requests.accept(assistant, request.id, "2025-12-01T10:00")

    with pytest.raises(InvalidTransitionError):
        requests.cancel(patient, request.id)
    assert requests.get_request(request.id).status == RequestStatus.ACCEPTED


def test_lenient_cancel_overwrites_any_status(db, patient, assistant):
    requests = RequestService(db, Settings(CANCEL_REQUIRES_SENT_STATUS=False))
    request = requests.send(patient, assistant.id)
    requests.accept(assistant, request.id, "2025-12-01T10:00")
    requests.complete(requests.get_request(request.id))

    cancelled = requests.cancel(patient, request.id)

    assert cancelled.status == RequestStatus.CANCELLED


def test_complete_requires_accepted(requests, patient, assistant):
    request = requests.send(patient, assistant.id)

    with pytest.raises(InvalidTransitionError):
        requests.complete(request)


def test_listings_filter_by_party_newest_first(requests, patient, assistant, make_record):
    other_patient = make_record("patient")
    first = requests.send(patient, assistant.id)
    second = requests.send(patient, assistant.id)
    requests.send(other_patient, assistant.id)

    mine = requests.my_requests(patient)
    assert [r.id for r in mine] == [second.id, first.id]

    assert len(requests.for_assistant(assistant)) == 3
    with pytest.raises(ForbiddenError):
        requests.for_assistant(patient)
    with pytest.raises(ForbiddenError):
        requests.my_requests(assistant)
