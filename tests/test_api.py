"""API endpoint tests for health and authentication."""

from datetime import UTC, datetime, timedelta
from unittest.mock import PropertyMock, patch

from todo_api.config import Settings
from todo_api.models.user import User
from todo_api.services.auth import AuthService, verify_password
from todo_api.services.tokens import get_token_service


def cookie_attributes(response) -> list[str]:
    """Lower-cased Set-Cookie attributes, without the cookie value."""
    return [part.strip() for part in response.headers["set-cookie"].lower().split(";")[1:]]


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_register_user(client):
    """Test user registration returns the public user view."""
    response = client.post(
        "/api/auth/register",
        json={"name": "New User", "email": "newuser@example.com", "password": "password123"},
    )
    assert response.status_code == 201
    user = response.json()["user"]
    assert user["email"] == "newuser@example.com"
    assert user["name"] == "New User"
    assert user["id"]
    assert set(user) == {"id", "name", "email"}


def test_register_sets_session_cookie(client):
    """Test the session cookie attributes on registration."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Cookie", "email": "cookie@example.com", "password": "password123"},
    )
    assert response.status_code == 201
    assert response.cookies.get("token")

    attributes = cookie_attributes(response)
    assert "httponly" in attributes
    assert "samesite=lax" in attributes
    assert "path=/" in attributes
    assert "max-age=604800" in attributes
    # Only production marks the cookie secure
    assert "secure" not in attributes


def test_session_cookie_secure_in_production(client_factory, user):
    """Test register and login mark the session cookie secure in production."""
    with patch.object(Settings, "is_production", new_callable=PropertyMock, return_value=True):
        registered = client_factory().post(
            "/api/auth/register",
            json={"name": "Prod", "email": "prod@example.com", "password": "password123"},
        )
        logged_in = client_factory().post(
            "/api/auth/login", json={"email": user["email"], "password": "testpass123"}
        )

    assert registered.status_code == 201
    assert logged_in.status_code == 200
    for response in (registered, logged_in):
        attributes = cookie_attributes(response)
        assert "secure" in attributes
        assert "httponly" in attributes
        assert "samesite=lax" in attributes


def test_register_keeps_email_case(client_factory):
    """Test the email is stored and matched exactly as submitted."""
    email = "Alice.Smith@Example.COM"
    response = client_factory().post(
        "/api/auth/register",
        json={"name": "Alice", "email": email, "password": "password123"},
    )
    assert response.status_code == 201
    assert response.json()["user"]["email"] == email

    exact = client_factory().post(
        "/api/auth/login", json={"email": email, "password": "password123"}
    )
    assert exact.status_code == 200
    assert exact.json()["user"]["email"] == email

    lowered = client_factory().post(
        "/api/auth/login", json={"email": email.lower(), "password": "password123"}
    )
    assert lowered.status_code == 401


def test_register_stores_hashed_password(client, db):
    """Test the raw password is never stored."""
    client.post(
        "/api/auth/register",
        json={"name": "Hash", "email": "hash@example.com", "password": "password123"},
    )
    stored = db.query(User).filter(User.email == "hash@example.com").one()
    assert stored.password_hash != "password123"
    assert verify_password("password123", stored.password_hash)


def test_register_duplicate_email(client, user):
    """Test registration with a claimed email fails regardless of name/password."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Someone Else", "email": user["email"], "password": "different-pass"},
    )
    assert response.status_code == 409
    assert response.json() == {
        "statusCode": 409,
        "error": "User with this email already exists",
    }


def test_register_duplicate_email_race(client, user):
    """Test a unique-index violation at insert time is reported as a conflict."""
    with patch.object(AuthService, "get_user_by_email", return_value=None):
        response = client.post(
            "/api/auth/register",
            json={"name": "Racer", "email": user["email"], "password": "password123"},
        )
    assert response.status_code == 409
    assert response.json()["error"] == "User with this email already exists"

    # The session is usable again after the rollback
    assert client.get("/api/auth/me").status_code == 200


def test_register_validation_reports_all_fields(client):
    """Test every invalid registration field is reported together."""
    response = client.post(
        "/api/auth/register",
        json={"name": "", "email": "not-an-email", "password": "123"},
    )
    assert response.status_code == 400
    data = response.json()
    assert data["statusCode"] == 400
    assert data["error"] == "Validation failed"
    assert {detail["field"] for detail in data["details"]} == {"name", "email", "password"}


def test_register_missing_fields(client):
    """Test missing registration fields are reported."""
    response = client.post("/api/auth/register", json={"email": "x@example.com"})
    assert response.status_code == 400
    assert {detail["field"] for detail in response.json()["details"]} == {"name", "password"}


def test_login(client_factory, user):
    """Test user login sets the session cookie."""
    fresh = client_factory()
    response = fresh.post(
        "/api/auth/login", json={"email": user["email"], "password": "testpass123"}
    )
    assert response.status_code == 200
    assert response.json()["user"] == user
    assert response.cookies.get("token")

    me = fresh.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == user["id"]


def test_login_failures_are_indistinguishable(client, user):
    """Test wrong password and unknown email produce the same response."""
    wrong_password = client.post(
        "/api/auth/login", json={"email": user["email"], "password": "wrongpass"}
    )
    unknown_email = client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": "testpass123"}
    )

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json() == {"statusCode": 401, "error": "Invalid credentials"}


def test_login_validation(client):
    """Test login requires a valid email and a non-empty password."""
    response = client.post("/api/auth/login", json={"email": "bad", "password": ""})
    assert response.status_code == 400
    assert {detail["field"] for detail in response.json()["details"]} == {"email", "password"}


def test_get_current_user(client, user):
    """Test getting current user info."""
    response = client.get("/api/auth/me")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == user["id"]
    assert data["email"] == user["email"]
    assert data["name"] == user["name"]
    assert data["createdAt"]
    assert "passwordHash" not in data
    assert "password_hash" not in data


def test_get_current_user_requires_cookie(client_factory):
    """Test /me without a session cookie is rejected."""
    response = client_factory().get("/api/auth/me")
    assert response.status_code == 401
    assert response.json() == {"statusCode": 401, "error": "Not authenticated"}


def test_get_current_user_deleted_account(client, user, db):
    """Test a valid token for a deleted account yields 404 from /me."""
    db.query(User).delete()
    db.commit()

    response = client.get("/api/auth/me")
    assert response.status_code == 404
    assert response.json()["error"] == "User not found"


def test_invalid_token_rejected(client_factory):
    """Test a token that does not verify is rejected."""
    fresh = client_factory()
    fresh.cookies.set("token", "not-a-jwt")
    response = fresh.get("/api/auth/me")
    assert response.status_code == 401


def test_expired_token_rejected(client_factory, user):
    """Test a correctly signed token older than seven days is rejected."""
    issued_at = datetime.now(UTC) - timedelta(days=7, minutes=1)
    token = get_token_service().issue(user["id"], issued_at=issued_at)

    fresh = client_factory()
    fresh.cookies.set("token", token)
    assert fresh.get("/api/auth/me").status_code == 401
    assert fresh.get("/api/todos").status_code == 401


def test_logout(client, user):
    """Test logout clears the session cookie."""
    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}

    assert response.headers["set-cookie"].startswith("token=")
    attributes = cookie_attributes(response)
    assert "max-age=0" in attributes
    assert "path=/" in attributes
    assert "httponly" in attributes

    assert client.get("/api/auth/me").status_code == 401


def test_logout_without_session(client_factory):
    """Test logout always succeeds."""
    response = client_factory().post("/api/auth/logout")
    assert response.status_code == 200


def test_unknown_route_uses_error_shape(client):
    """Test framework-level errors use the same JSON error shape."""
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.json() == {"statusCode": 404, "error": "Not Found"}
