import pytest

from mediconnect.core.exceptions import (
    ForbiddenError, InvalidTransitionError, NotFoundError, ValidationError
)
from mediconnect.schemas.report import MedicalData, ReportStatus
from mediconnect.schemas.request import RequestStatus
from mediconnect.schemas.review import ReviewCreate
from mediconnect.services.report_service import ReportService
from mediconnect.services.request_service import RequestService

VITALS = MedicalData(blood_pressure="120/80", blood_sugar="95", heart_rate="72")


@pytest.fixture
def requests(db, test_settings):
    return RequestService(db, test_settings)


@pytest.fixture
def reports(db, requests):
    return ReportService(db, requests)


@pytest.fixture
def people(make_record):
    return {
        "patient": make_record("patient", name="Pat Patient"),
        "assistant": make_record("assistant", name="Ann Assistant"),
        "doctor": make_record("doctor", name="Dr. Dana", specialization="Cardiology"),
    }


@pytest.fixture
def accepted_request(requests, people):
    request = requests.send(people["patient"], people["assistant"].id)
    return requests.accept(people["assistant"], request.id, "2025-12-01T10:00")


def test_upload_completes_request_and_creates_pending_report(reports, requests, people, accepted_request):
    report = reports.upload_report(people["assistant"], accepted_request.id, VITALS)

    assert report.status == ReportStatus.PENDING
    assert report.request_id == accepted_request.id
    assert report.patient_name == "Pat Patient"
    assert report.assistant_name == "Ann Assistant"
    assert report.medical_data.blood_pressure == "120/80"
    assert requests.get_request(accepted_request.id).status == RequestStatus.COMPLETED
    assert [r.id for r in reports.list_my_uploads(people["assistant"])] == [report.id]


def test_second_upload_is_rejected(reports, people, accepted_request):
    reports.upload_report(people["assistant"], accepted_request.id, VITALS)

    with pytest.raises(InvalidTransitionError):
        reports.upload_report(people["assistant"], accepted_request.id, VITALS)
    assert len(reports.list_my_uploads(people["assistant"])) == 1


def test_upload_requires_accepted_request(reports, requests, people):
    request = requests.send(people["patient"], people["assistant"].id)

    with pytest.raises(InvalidTransitionError):
        reports.upload_report(people["assistant"], request.id, VITALS)


def test_upload_by_unassigned_assistant_is_forbidden(reports, people, accepted_request, make_record):
    with pytest.raises(ForbiddenError):
        reports.upload_report(make_record("assistant"), accepted_request.id, VITALS)
    with pytest.raises(ForbiddenError):
        reports.upload_report(people["doctor"], accepted_request.id, VITALS)


def test_upload_requires_core_vitals(reports, requests, people, accepted_request):
    incomplete = MedicalData(blood_pressure="120/80", heart_rate="")

    with pytest.raises(ValidationError) as excinfo:
        reports.upload_report(people["assistant"], accepted_request.id, incomplete)

    assert "bloodSugar" in excinfo.value.message
    assert "heartRate" in excinfo.value.message
    assert requests.get_request(accepted_request.id).status == RequestStatus.ACCEPTED


def test_review_marks_report_reviewed(reports, people, accepted_request):
    report = reports.upload_report(people["assistant"], accepted_request.id, VITALS)

    review = reports.create_review(people["doctor"], ReviewCreate(
        report_id=report.id, diagnosis="Hypertension, stage 1", prescription="Amlodipine 5mg"
    ))

    assert review.doctor_name == "Dr. Dana"
    assert review.patient_id == people["patient"].id
    assert review.advice is None
    stored = reports.get_report(report.id)
    assert stored.status == ReportStatus.REVIEWED
    assert stored.reviewed_by == people["doctor"].id
    assert reports.list_pending(people["doctor"]) == []
    assert [r.id for r in reports.list_reviewed(people["doctor"])] == [review.id]
    assert [r.id for r in reports.my_reviews(people["patient"])] == [review.id]


@pytest.mark.parametrize("diagnosis", [None, "", "   "])
def test_review_requires_diagnosis(reports, people, accepted_request, diagnosis):
    report = reports.upload_report(people["assistant"], accepted_request.id, VITALS)

    with pytest.raises(ValidationError):
        reports.create_review(people["doctor"], ReviewCreate(report_id=report.id, diagnosis=diagnosis))

    assert reports.get_report(report.id).status == ReportStatus.PENDING
    assert reports.my_reviews(people["patient"]) == []


def test_second_review_is_rejected(reports, people, accepted_request, make_record):
    report = reports.upload_report(people["assistant"], accepted_request.id, VITALS)
    reports.create_review(people["doctor"], ReviewCreate(report_id=report.id, diagnosis="Normal"))

    with pytest.raises(InvalidTransitionError):
        reports.create_review(make_record("doctor"), ReviewCreate(report_id=report.id, diagnosis="Other"))
    assert len(reports.my_reviews(people["patient"])) == 1


def test_only_doctors_review(reports, people, accepted_request):
    report = reports.upload_report(people["assistant"], accepted_request.id, VITALS)

    for role in ("patient", "assistant"):
        with pytest.raises(ForbiddenError):
            reports.create_review(people[role], ReviewCreate(report_id=report.id, diagnosis="x"))


def test_review_unknown_report(reports, people):
    with pytest.raises(NotFoundError):
        reports.create_review(people["doctor"], ReviewCreate(report_id="report:0:none", diagnosis="x"))


def test_listing_roles(reports, people):
    with pytest.raises(ForbiddenError):
        reports.list_pending(people["assistant"])
    with pytest.raises(ForbiddenError):
        reports.my_reviews(people["doctor"])
    with pytest.raises(ForbiddenError):
        reports.list_my_uploads(people["patient"])
