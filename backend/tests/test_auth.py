"""Tests for /api/auth and role guards"""
from backend.app.models.profile import UserProfile
from backend.app.models.user import User


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    assert client.get("/health").json() == {"status": "healthy"}


def test_register_seeker_creates_profile(client, db_session):
    r = client.post(
        "/api/auth/register",
        json={"full_name": "Ana Reyes", "email": "Ana@Example.com", "password": "secret123"},
    )
    assert r.status_code == 201
    data = r.json()
    assert data["access_token"]
    assert data["user"]["email"] == "ana@example.com"
    assert data["user"]["role"] == "jobseeker"

    user = db_session.query(User).filter(User.email == "ana@example.com").first()
    assert db_session.query(UserProfile).filter(UserProfile.user_id == user.id).count() == 1


def test_register_employer_has_no_seeker_profile(client, db_session):
    r = client.post(
        "/api/auth/register",
        json={"full_name": "Acme", "email": "hr@acme.com", "password": "secret123", "role": "employer"},
    )
    assert r.status_code == 201
    assert r.json()["user"]["role"] == "employer"
    assert db_session.query(UserProfile).count() == 0


def test_register_duplicate_email(client, seeker_user):
    r = client.post(
        "/api/auth/register",
        json={"full_name": "Dup", "email": "seeker@example.com", "password": "x"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Email already registered"


def test_register_unknown_role_rejected(client):
    r = client.post(
        "/api/auth/register",
        json={"full_name": "X", "email": "x@example.com", "password": "x", "role": "admin"},
    )
    assert r.status_code == 422


def test_login_and_me(client, seeker_user):
    r = client.post("/api/auth/login", json={"email": "seeker@example.com", "password": "testpass123"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["full_name"] == "Ana Reyes"
    assert r.json()["role"] == "jobseeker"


def test_login_wrong_password(client, seeker_user):
    r = client.post("/api/auth/login", json={"email": "seeker@example.com", "password": "nope"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid email or password"


def test_invalid_token(client):
    r = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_refresh_token(client, seeker_headers):
    r = client.post("/api/auth/refresh", headers=seeker_headers)
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "seeker@example.com"
