import pytest


@pytest.fixture
def parties(register):
    return {
        "patient": register("patient", "Pat Patient"),
        "assistant": register("assistant", "Ann Assistant", area="Lahore"),
    }


def send(client, parties):
    response = client.post(
        "/api/v1/requests/send",
        json={"assistantId": parties["assistant"]["id"]},
        headers=parties["patient"]["headers"]
    )
    assert response.status_code == 200, response.text
    return response.json()["request"]


def test_send_and_list(client, parties):
    request = send(client, parties)

    assert request["status"] == "sent"
    assert request["patientName"] == "Pat Patient"
    assert request["assistantName"] == "Ann Assistant"
    assert request["id"].startswith("req:")

    mine = client.get("/api/v1/requests/my-requests", headers=parties["patient"]["headers"]).json()
    inbox = client.get("/api/v1/requests/for-assistant", headers=parties["assistant"]["headers"]).json()
    assert [r["id"] for r in mine["requests"]] == [request["id"]]
    assert [r["id"] for r in inbox["requests"]] == [request["id"]]


def test_send_to_unknown_assistant(client, parties):
    response = client.post(
        "/api/v1/requests/send", json={"assistantId": "nobody"}, headers=parties["patient"]["headers"]
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Assistant not found"}


def test_only_patients_send(client, parties):
    response = client.post(
        "/api/v1/requests/send",
        json={"assistantId": parties["assistant"]["id"]},
        headers=parties["assistant"]["headers"]
    )

    assert response.status_code == 403


def test_accept(client, parties):
    request = send(client, parties)

    response = client.post(
        "/api/v1/requests/accept",
        json={"requestId": request["id"], "scheduledDate": "2025-12-01T10:00"},
        headers=parties["assistant"]["headers"]
    )

    assert response.status_code == 200
    accepted = response.json()["request"]
    assert accepted["status"] == "accepted"
    assert accepted["scheduledDate"] == "2025-12-01T10:00"
    assert accepted["acceptedAt"]


def test_accept_without_date(client, parties):
    request = send(client, parties)

    response = client.post(
        "/api/v1/requests/accept", json={"requestId": request["id"]}, headers=parties["assistant"]["headers"]
    )

    assert response.status_code == 400


def test_accept_by_other_assistant(client, parties, register):
    request = send(client, parties)
    other = register("assistant", "Other Assistant")

    response = client.post(
        "/api/v1/requests/accept",
        json={"requestId": request["id"], "scheduledDate": "2025-12-01T10:00"},
        headers=other["headers"]
    )

    assert response.status_code == 403


def test_cancel(client, parties):
    request = send(client, parties)

    response = client.post(
        "/api/v1/requests/cancel", json={"requestId": request["id"]}, headers=parties["patient"]["headers"]
    )

    assert response.status_code == 200
    assert response.json()["request"]["status"] == "cancelled"
    assert response.json()["request"]["cancelledAt"]


def test_cancel_after_accept_rejected(client, parties):
    request = send(client, parties)
    client.post(
        "/api/v1/requests/accept",
        json={"requestId": request["id"], "scheduledDate": "2025-12-01T10:00"},
        headers=parties["assistant"]["headers"]
    )

    response = client.post(
        "/api/v1/requests/cancel", json={"requestId": request["id"]}, headers=parties["patient"]["headers"]
    )

    assert response.status_code == 400


def test_unknown_request(client, parties):
    response = client.post(
        "/api/v1/requests/accept",
        json={"requestId": "req:0:missing", "scheduledDate": "2025-12-01T10:00"},
        headers=parties["assistant"]["headers"]
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Request not found"}
