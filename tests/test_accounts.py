"""API tests for the account routes under /api/users."""

import time
import uuid
from datetime import timedelta

from app.core.config import settings
from app.models.user import User, UserRole
from app.utils.auth import create_session_token, verify_password
from conftest import ALICE, BOB, TARA, auth_headers, login, register


# ─── Register ─────────────────────────────────────────────────────────────────

def test_register_returns_201_and_inactive_user(client):
    response = client.post("/api/users/register", json=ALICE)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered successfully"
    user = body["user"]
    assert user["name"] == "Alice"
    assert user["mobile"] == "9000000001"
    assert user["role"] == "Owner"
    assert user["isActive"] is False
    assert user["properties"] == []
    assert "password" not in user
    assert "passwordHash" not in user
    assert "otp" not in user


def test_register_stores_hash_not_plaintext(client, db_session):
    register(client, ALICE)

    stored = db_session.query(User).filter(User.mobile == ALICE["mobile"]).one()
    assert stored.password_hash != ALICE["password"]
    assert verify_password(ALICE["password"], stored.password_hash)


def test_register_maps_legacy_role_names(client):
    user = register(client, {**TARA, "role": "User"})
    assert user["role"] == "Tenant"

    user = register(client, {**BOB, "role": "Broker"})
    assert user["role"] == "Owner"


def test_register_duplicate_email_conflicts(client):
    register(client, ALICE)

    response = client.post("/api/users/register", json={**BOB, "email": ALICE["email"]})

    assert response.status_code == 409
    assert response.json()["message"] == "Email already registered"


def test_register_duplicate_mobile_conflicts(client):
    register(client, ALICE)

    response = client.post("/api/users/register", json={**BOB, "mobile": ALICE["mobile"]})

    assert response.status_code == 409
    assert response.json()["message"] == "Mobile number already registered"


def test_register_missing_fields_returns_400(client):
    response = client.post("/api/users/register", json={"name": "Alice"})

    assert response.status_code == 400
    body = response.json()
    fields = {err["field"] for err in body["errors"]}
    assert {"email", "mobile", "password", "role"} <= fields


def test_register_rejects_bad_mobile_and_role(client):
    assert client.post("/api/users/register", json={**ALICE, "mobile": "12345"}).status_code == 400
    assert client.post("/api/users/register", json={**ALICE, "role": "Admin"}).status_code == 400


# ─── Login ────────────────────────────────────────────────────────────────────

def test_login_returns_token_user_and_expiry(client):
    register(client, ALICE)
    before_ms = int(time.time() * 1000)

    body = login(client, ALICE)

    assert body["message"] == "Login successful"
    assert body["token"]
    assert body["user"]["isActive"] is True
    assert "passwordHash" not in body["user"]
    window_ms = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60 * 1000
    assert before_ms + window_ms - 5000 <= body["expiresAt"] <= before_ms + window_ms + 5000


def test_login_failures_are_indistinguishable(client):
    register(client, ALICE)

    wrong_password = client.post("/api/users/login", json={"mobile": ALICE["mobile"], "password": "nope!!"})
    unknown_mobile = client.post("/api/users/login", json={"mobile": "9999999999", "password": ALICE["password"]})

    assert wrong_password.status_code == unknown_mobile.status_code == 400
    assert wrong_password.json() == unknown_mobile.json() == {"message": "Invalid credentials"}


def test_login_accepts_mobile_in_the_format_used_to_register(client):
    user = register(client, {**ALICE, "mobile": "90000-00001"})
    assert user["mobile"] == "9000000001"

    for mobile in ("90000-00001", "90000 00001", "9000000001"):
        response = client.post("/api/users/login", json={"mobile": mobile, "password": ALICE["password"]})
        assert response.status_code == 200, mobile

    malformed = client.post("/api/users/login", json={"mobile": "12-ab", "password": ALICE["password"]})
    assert malformed.status_code == 400
    assert malformed.json()["message"] == "Invalid credentials"


# ─── Access gate ──────────────────────────────────────────────────────────────

def test_token_authenticates_same_user_and_role(client):
    user = register(client, ALICE)
    token = login(client, ALICE)["token"]

    response = client.get("/api/users/profile", headers=auth_headers(token))

    assert response.status_code == 200
    assert response.json()["user"]["id"] == user["id"]
    assert response.json()["user"]["role"] == "Owner"


def test_missing_token_is_unauthenticated(client):
    response = client.get("/api/users/profile")

    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. No token provided."


def test_expired_login_token_fails_as_expired(client, monkeypatch):
    register(client, ALICE)
    monkeypatch.setattr(settings, "ACCESS_TOKEN_EXPIRE_MINUTES", -1)
    token = login(client, ALICE)["token"]

    response = client.get("/api/users/profile", headers=auth_headers(token))

    assert response.status_code == 401
    assert response.json()["message"] == "Session expired. Please log in again."


def test_invalid_token_fails_as_invalid(client):
    response = client.get("/api/users/profile", headers=auth_headers("not-a-jwt"))

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid token."


# ─── Logout ───────────────────────────────────────────────────────────────────

def test_logout_marks_user_inactive(client, db_session):
    register(client, ALICE)
    token = login(client, ALICE)["token"]

    response = client.post("/api/users/logout", headers=auth_headers(token))

    assert response.status_code == 200
    assert response.json() == {"message": "Logout successful"}
    stored = db_session.query(User).filter(User.mobile == ALICE["mobile"]).one()
    assert stored.is_active is False


def test_logout_without_header_is_401(client):
    response = client.post("/api/users/logout")
    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized"


def test_logout_with_bad_or_expired_token(client):
    assert client.post("/api/users/logout", headers=auth_headers("garbage")).status_code == 400

    expired = create_session_token(uuid.uuid4(), UserRole.OWNER, expires_delta=timedelta(seconds=-5))
    assert client.post("/api/users/logout", headers=auth_headers(expired)).status_code == 401


def test_logout_for_deleted_user_is_a_noop(client):
    token = create_session_token(uuid.uuid4(), UserRole.TENANT)
    response = client.post("/api/users/logout", headers=auth_headers(token))
    assert response.status_code == 200


# ─── Profile / delete account ─────────────────────────────────────────────────

def test_profile_for_vanished_user_is_404(client):
    token = create_session_token(uuid.uuid4(), UserRole.OWNER)

    response = client.get("/api/users/profile", headers=auth_headers(token))

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_delete_account_makes_stale_token_fail(client, alice_headers):
    response = client.delete("/api/users/delete-account", headers=alice_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Account deleted successfully"

    assert client.get("/api/users/profile", headers=alice_headers).status_code == 404
    assert client.delete("/api/users/delete-account", headers=alice_headers).status_code == 404


def test_delete_account_requires_token(client):
    assert client.delete("/api/users/delete-account").status_code == 401


# ─── Forgot password ──────────────────────────────────────────────────────────

def test_forgot_password_replaces_credential(client):
    register(client, ALICE)

    response = client.post(
        "/api/users/forgot-password",
        json={"mobile": ALICE["mobile"], "newPassword": "brand-new"},
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Password updated successfully"
    old = client.post("/api/users/login", json={"mobile": ALICE["mobile"], "password": ALICE["password"]})
    assert old.status_code == 400
    login(client, {**ALICE, "password": "brand-new"})


def test_forgot_password_accepts_formatted_mobile(client):
    register(client, {**ALICE, "mobile": "90000-00001"})

    response = client.post(
        "/api/users/forgot-password",
        json={"mobile": "90000 00001", "newPassword": "brand-new"},
    )

    assert response.status_code == 200
    login(client, {**ALICE, "password": "brand-new"})


def test_forgot_password_validation(client):
    bad_mobile = client.post("/api/users/forgot-password", json={"mobile": "12ab", "newPassword": "longenough"})
    assert bad_mobile.status_code == 400
    assert bad_mobile.json()["message"] == "Invalid mobile number"

    short = client.post("/api/users/forgot-password", json={"mobile": "9000000001", "newPassword": "123"})
    assert short.status_code == 400
    assert short.json()["message"] == "Password must be at least 6 characters"

    missing = client.post("/api/users/forgot-password", json={})
    assert missing.status_code == 400


def test_forgot_password_unknown_mobile_is_404(client):
    response = client.post("/api/users/forgot-password", json={"mobile": "9123456789", "newPassword": "longenough"})
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


# ─── All users ────────────────────────────────────────────────────────────────

def test_all_users_lists_summary_fields_only(client):
    register(client, ALICE)
    register(client, TARA)
    login(client, ALICE)

    response = client.get("/api/users/all-users")

    assert response.status_code == 200
    assert response.json() == [
        {"name": "Alice", "mobile": "9000000001", "role": "Owner", "isActive": True},
        {"name": "Tara", "mobile": "9000000003", "role": "Tenant", "isActive": False},
    ]
