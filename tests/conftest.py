import re
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from mediconnect.core.config import Settings
from mediconnect.db.init_db import seed_admin
from mediconnect.db.session import build_engine, create_tables, drop_tables, get_db
from mediconnect.dependencies import get_settings
from mediconnect.main import create_app
from mediconnect.schemas.base import utcnow
from mediconnect.schemas.user import Role, User, UserStatus
from mediconnect.services.identity_service import IdentityProvider
from mediconnect.services.user_service import UserService

ADMIN_EMAIL = "admin@gmail.com"
ADMIN_PASSWORD = "Admin!2345"
PASSWORD = "Secret!234"


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        UPLOAD_DIR=str(tmp_path / "uploads"),
        FIRST_ADMIN_EMAIL=ADMIN_EMAIL,
        FIRST_ADMIN_PASSWORD=ADMIN_PASSWORD,
        FIRST_ADMIN_NAME="Ada Admin",
        USE_S3=False,
    )


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    create_tables(bind=engine)
    yield engine
    drop_tables(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def identity(db, test_settings):
    return IdentityProvider(db, test_settings)


@pytest.fixture
def user_service(db, identity):
    return UserService(db, identity)


@pytest.fixture
def admin(db, test_settings):
    return seed_admin(db, test_settings)


@pytest.fixture
def make_record(user_service):
    """Store a user record directly, without credentials."""
    def _make(role, name=None, status=UserStatus.APPROVED, **fields):
        role = Role(role)
        user_id = str(uuid.uuid4())
        return user_service.save_user(User(
            id=user_id,
            email=f"{role.value}.{user_id[:8]}@gmail.com",
            name=name or f"{role.value.title()} {user_id[:4]}",
            role=role,
            status=status,
            created_at=utcnow(),
            **fields
        ))
    return _make


@pytest.fixture
def client(session_factory, admin, test_settings):
    app = create_app(test_settings, initialize_db=False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    return TestClient(app)


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def signup(client, email, role, name, password=PASSWORD, **extra):
    payload = {"email": email, "password": password, "name": name, "role": role}
    payload.update(extra)
    return client.post("/api/v1/auth/signup", json=payload)


def signin(client, email, password=PASSWORD):
    return client.post("/api/v1/auth/signin", json={"email": email, "password": password})


@pytest.fixture
def admin_headers(client):
    response = signin(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    assert response.status_code == 200, response.text
    return auth_headers(response.json()["accessToken"])


@pytest.fixture
def register(client, admin_headers):
    """Sign up (and approve, for staff) a user; returns id, user and headers."""
    def _register(role, name, email=None, approve=True, **extra):
        email = email or f"{re.sub(r'[^a-z0-9]+', '.', name.lower()).strip('.')}@gmail.com"
        response = signup(client, email, role, name, **extra)
        assert response.status_code == 200, response.text
        user = response.json()["user"]

        if role != "patient" and approve:
            approved = client.post(
                "/api/v1/users/approve", json={"userId": user["id"]}, headers=admin_headers
            )
            assert approved.status_code == 200, approved.text

        result = {"id": user["id"], "email": email, "user": user, "headers": None}
        if role == "patient" or approve:
            token = signin(client, email).json()["accessToken"]
            result["headers"] = auth_headers(token)
        return result
    return _register
