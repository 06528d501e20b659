from sqlmodel import select

from campusconnect.models import Role, User

from .conftest import PASSWORD, auth_headers


def signup_body(**overrides):
    body = {
        "name": "Asha Rao",
        "email": "asha@campus.edu",
        "password": PASSWORD,
        "role": "student",
        "department": "CS",
        "year": 2,
    }
    body.update(overrides)
    return body


def test_signup_stores_hash_and_queues_verification_email(client, session, email_service):
    response = client.post("/auth/signup", json=signup_body())

    assert response.status_code == 201
    user_id = response.json()["userId"]
    user = session.get(User, user_id)
    assert user.password_hash != PASSWORD
    assert user.role == Role.STUDENT
    assert user.is_verified is False
    assert email_service.sent == [("asha@campus.edu", user.verification_token)]


def test_signup_duplicate_email_conflicts(client):
    client.post("/auth/signup", json=signup_body())
    response = client.post("/auth/signup", json=signup_body(name="Someone Else"))

    assert response.status_code == 409
    assert response.json()["message"] == "User already exists with this email"


def test_signup_validation_lists_fields(client):
    response = client.post(
        "/auth/signup",
        json=signup_body(name="A", email="not-an-email", password="123", role="admin"),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    fields = {e["field"] for e in body["errors"]}
    assert {"name", "email", "password", "role"} <= fields


def test_alumni_signup_drops_year(client, session):
    response = client.post("/auth/signup", json=signup_body(role="ALUMNI", year=3))

    user = session.get(User, response.json()["userId"])
    assert user.role == Role.ALUMNI
    assert user.year is None


def test_login_requires_verification(client, email_service):
    client.post("/auth/signup", json=signup_body())

    before = client.post("/auth/login", json={"email": "asha@campus.edu", "password": PASSWORD})
    assert before.status_code == 401

    client.get(f"/auth/verify-email/{email_service.token_for('asha@campus.edu')}")
    after = client.post("/auth/login", json={"email": "asha@campus.edu", "password": PASSWORD})
    assert after.status_code == 200
    assert "passwordHash" not in after.json()["user"]
    assert "password_hash" not in after.json()["user"]


def test_login_wrong_password(client, student):
    response = client.post("/auth/login", json={"email": student["email"], "password": "wrong-pass"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_verify_token_is_single_use(client, session, email_service):
    client.post("/auth/signup", json=signup_body())
    token = email_service.token_for("asha@campus.edu")

    first = client.get(f"/auth/verify-email/{token}")
    second = client.get(f"/auth/verify-email/{token}")

    assert first.status_code == 200
    assert second.status_code == 400
    user = session.exec(select(User).where(User.email == "asha@campus.edu")).one()
    assert user.is_verified is True
    assert user.verification_token is None


def test_signup_verify_login_me_scenario(client, email_service):
    client.post("/auth/signup", json=signup_body())
    client.get(f"/auth/verify-email/{email_service.token_for('asha@campus.edu')}")
    token = client.post("/auth/login", json={"email": "asha@campus.edu", "password": PASSWORD}).json()["token"]

    response = client.get("/auth/me", headers=auth_headers(token))

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["role"] == "STUDENT"
    assert user["year"] == 2
    assert user["department"] == "CS"


def test_me_rejects_missing_and_bad_tokens(client):
    assert client.get("/auth/me").status_code == 401
    bad = client.get("/auth/me", headers=auth_headers("not-a-jwt"))
    assert bad.status_code == 401
    assert bad.json() == {"message": "Token is not valid"}


def test_update_profile_both_paths(client, student, alumni):
    body = {"name": "New Name", "department": "Math", "year": 4, "bio": "Likes graphs", "skills": ["python", "sql"]}

    response = client.put("/auth/profile", json=body, headers=student["headers"])
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "New Name"
    assert user["year"] == 4
    assert user["skills"] == ["python", "sql"]

    alias = client.put("/profile", json=body, headers=alumni["headers"])
    assert alias.status_code == 200
    assert alias.json()["user"]["year"] is None


def test_update_profile_rejects_long_bio(client, student):
    body = {"name": "New Name", "department": "Math", "bio": "x" * 501}

    response = client.put("/auth/profile", json=body, headers=student["headers"])

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "bio"


def test_api_prefix_and_health(client):
    assert client.get("/health").json()["status"] == "ok"
    assert client.get("/api/health").status_code == 200
    response = client.post("/api/auth/login", json={"email": "nobody@campus.edu", "password": "x"})
    assert response.status_code == 401
