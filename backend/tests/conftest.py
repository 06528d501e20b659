"""
CampusConnect - test configuration and fixtures
"""
import itertools
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only"
os.environ["SMTP_HOST"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from campusconnect.db import build_engine, get_session, init_db
from campusconnect.deps import get_email_service, get_storage_service
from campusconnect.main import app
from campusconnect.models import Role, User
from campusconnect.security import hash_password

PASSWORD = "secret123"


class FakeEmailService:
    def __init__(self):
        self.sent = []

    async def send_verification_email(self, to_email, token):
        self.sent.append((to_email, token))
        return True

    def token_for(self, email):
        return [token for to, token in self.sent if to == email][-1]


class FakeStorageService:
    def __init__(self):
        self.uploads = []
        self.discarded = []

    def upload(self, content, filename, content_type, folder="resources"):
        self.uploads.append(
            {"content": content, "filename": filename, "content_type": content_type, "folder": folder}
        )
        return f"https://cdn.campus.test/{folder}/{filename}"

    def discard(self, url):
        self.discarded.append(url)


@pytest.fixture(name="engine")
def engine_fixture():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """A file-backed database, so threads each get their own connection."""
    engine = build_engine(f"sqlite:///{tmp_path / 'campus.db'}")
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def storage_service():
    return FakeStorageService()


@pytest.fixture(name="client")
def client_fixture(session, email_service, storage_service):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_email_service] = lambda: email_service
    app.dependency_overrides[get_storage_service] = lambda: storage_service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_user(client, email_service):
    """Sign up, verify and log in a user; returns id, email, token and headers."""
    counter = itertools.count(1)

    def _register(role="student", department="CS", year=2, name=None):
        n = next(counter)
        email = f"{role}{n}@campus.edu"
        body = {
            "name": name or f"{role.title()} {n}",
            "email": email,
            "password": PASSWORD,
            "role": role,
            "department": department,
            "year": year,
        }
        response = client.post("/auth/signup", json=body)
        assert response.status_code == 201, response.text
        verify = client.get(f"/auth/verify-email/{email_service.token_for(email)}")
        assert verify.status_code == 200, verify.text
        login = client.post("/auth/login", json={"email": email, "password": PASSWORD})
        assert login.status_code == 200, login.text
        data = login.json()
        return {
            "id": data["user"]["id"],
            "email": email,
            "token": data["token"],
            "headers": auth_headers(data["token"]),
        }

    return _register


@pytest.fixture
def student(register_user):
    return register_user("student")


@pytest.fixture
def other_student(register_user):
    return register_user("student", department="EE", year=3)


@pytest.fixture
def alumni(register_user):
    return register_user("alumni", department="CS", year=None)


@pytest.fixture
def admin(client, session):
    user = User(
        name="Campus Admin",
        email="admin@campus.edu",
        password_hash=hash_password(PASSWORD),
        role=Role.ADMIN,
        department="Administration",
        is_verified=True,
    )
    session.add(user)
    session.commit()
    login = client.post("/auth/login", json={"email": "admin@campus.edu", "password": PASSWORD})
    assert login.status_code == 200, login.text
    token = login.json()["token"]
    return {"id": user.id, "email": user.email, "token": token, "headers": auth_headers(token)}
