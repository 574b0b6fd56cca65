import pytest

from conftest import PASSWORD, auth_headers, signin, signup


def test_patient_signup_and_signin(client):
    response = signup(client, "pat@gmail.com", "patient", "Pat Patient", phone="+923001112223")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "approved"
    assert body["needsApproval"] is False
    assert body["user"]["phone"] == "+923001112223"

    signed_in = signin(client, "pat@gmail.com")
    assert signed_in.status_code == 200
    assert signed_in.json()["tokenType"] == "bearer"
    assert signed_in.json()["user"]["role"] == "patient"


@pytest.mark.parametrize("role", ["assistant", "doctor"])
def test_staff_signup_is_pending(client, role):
    body = signup(client, f"{role}@gmail.com", role, "Staff Member").json()

    assert body["status"] == "pending"
    assert body["needsApproval"] is True

    response = signin(client, f"{role}@gmail.com")
    assert response.status_code == 403
    assert response.json() == {"error": "Your account is pending admin approval"}


def test_rejected_staff_signin_message(client, admin_headers):
    user = signup(client, "doc@gmail.com", "doctor", "Dr. No").json()["user"]
    client.post("/api/v1/users/reject", json={"userId": user["id"], "reason": "Invalid license"}, headers=admin_headers)

    response = signin(client, "doc@gmail.com")

    assert response.status_code == 403
    assert response.json()["error"] == "Your account has been rejected"


@pytest.mark.parametrize("payload", [
    {"email": "not-an-email", "password": PASSWORD, "name": "X", "role": "patient"},
    {"email": "x@gmail.com", "password": "short", "name": "X", "role": "patient"},
    {"email": "x@gmail.com", "password": PASSWORD, "name": "   ", "role": "patient"},
    {"email": "x@gmail.com", "password": PASSWORD, "name": "X", "role": "admin"},
    {"email": "x@gmail.com", "password": PASSWORD, "name": "X", "role": "nurse"},
    {"email": "x@gmail.com", "password": PASSWORD, "role": "patient"},
])
def test_signup_validation(client, payload):
    response = client.post("/api/v1/auth/signup", json=payload)

    assert response.status_code == 400
    assert "error" in response.json()


def test_duplicate_signup(client):
    signup(client, "pat@gmail.com", "patient", "Pat")

    response = signup(client, "pat@gmail.com", "patient", "Pat Again")

    assert response.status_code == 400
    assert "already been registered" in response.json()["error"]


def test_wrong_password(client):
    signup(client, "pat@gmail.com", "patient", "Pat")

    response = signin(client, "pat@gmail.com", "wrong-password")

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid login credentials"}


def test_me_requires_token(client):
    response = client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.json() == {"error": "No token provided"}

    response = client.get("/api/v1/auth/me", headers=auth_headers("garbage"))
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_me_and_signout(client, register):
    patient = register("patient", "Pat Patient")

    me = client.get("/api/v1/auth/me", headers=patient["headers"])
    assert me.status_code == 200
    assert me.json()["user"]["email"] == patient["email"]

    assert client.post("/api/v1/auth/signout", headers=patient["headers"]).status_code == 200
    assert client.get("/api/v1/auth/me", headers=patient["headers"]).status_code == 401


def test_token_stops_working_after_rejection(client, register, admin_headers):
    doctor = register("doctor", "Dr. Later Rejected")
    assert client.get("/api/v1/auth/me", headers=doctor["headers"]).status_code == 200

    client.post("/api/v1/users/reject", json={"userId": doctor["id"]}, headers=admin_headers)

    response = client.get("/api/v1/auth/me", headers=doctor["headers"])
    assert response.status_code == 403


def test_admin_is_seeded(client, admin_headers):
    me = client.get("/api/v1/auth/me", headers=admin_headers).json()["user"]

    assert me["role"] == "admin"
    assert me["status"] == "approved"


def test_register_handles_names_with_punctuation(client, register):
    doctor = register("doctor", "Dr. Dana O'Neil")

    assert doctor["email"] == "dr.dana.o.neil@gmail.com"
    assert doctor["headers"] is not None
    assert client.get("/api/v1/auth/me", headers=doctor["headers"]).json()["user"]["name"] == "Dr. Dana O'Neil"
