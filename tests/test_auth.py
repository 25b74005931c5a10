from services.auth_service import request_password_reset
from tests.conftest import sign_up


def test_sign_up_sets_session_cookie(client):
    user = sign_up(client)
    assert user["email"] == "jane@example.com"
    assert "passwordHash" not in user

    response = client.get('/api/auth/session')
    assert response.status_code == 200
    assert response.get_json()["user"]["id"] == user["id"]


def test_sign_up_duplicate_email(client):
    sign_up(client)
    response = client.post('/api/auth/sign-up', json={
        "email": "JANE@example.com",
        "password": "password123",
    })
    assert response.status_code == 400
    assert response.get_json()["error"] == "An account with this email already exists"


def test_sign_up_validation(client):
    response = client.post('/api/auth/sign-up', json={"email": "not-an-email", "password": "short"})
    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "Invalid request data"
    assert {tuple(detail["loc"]) for detail in body["details"]} == {("email",), ("password",)}


def test_sign_in_and_out(app, client):
    sign_up(client)
    fresh = app.test_client()

    response = fresh.post('/api/auth/sign-in', json={"email": "jane@example.com", "password": "wrong-password"})
    assert response.status_code == 401
    assert response.get_json() == {"error": "Invalid email or password"}

    response = fresh.post('/api/auth/sign-in', json={"email": "jane@example.com", "password": "password123"})
    assert response.status_code == 200
    assert fresh.get('/api/auth/session').status_code == 200

    assert fresh.post('/api/auth/sign-out').status_code == 200
    assert fresh.get('/api/auth/session').status_code == 401


def test_protected_routes_require_session(client):
    for path in ('/api/profile', '/api/resumes', '/api/applications', '/api/dashboard/stats'):
        response = client.get(path)
        assert response.status_code == 401
        assert response.get_json() == {"error": "Unauthorized"}


def test_health_is_public(client):
    response = client.get('/api/health')
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_forgot_password_does_not_reveal_accounts(client):
    response = client.post('/api/auth/forgot-password', json={"email": "nobody@example.com"})
    assert response.status_code == 200
    assert response.get_json()["success"] is True


def test_reset_password_flow(app, client):
    sign_up(client)
    config = app.config['CONFIG']
    token = request_password_reset("jane@example.com", config)
    assert token

    response = client.post('/api/auth/reset-password', json={"token": token, "password": "new-password"})
    assert response.status_code == 200
    # existing sessions are revoked
    assert client.get('/api/auth/session').status_code == 401

    response = client.post('/api/auth/reset-password', json={"token": token, "password": "another-one"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid or expired reset token"

    response = client.post('/api/auth/sign-in', json={"email": "jane@example.com", "password": "new-password"})
    assert response.status_code == 200


def test_request_password_reset_unknown_email(app):
    assert request_password_reset("ghost@example.com", app.config['CONFIG']) is None


def test_sign_up_rejects_blank_email(client):
    for email in ("", "   "):
        response = client.post('/api/auth/sign-up', json={"email": email, "password": "password123"})
        assert response.status_code == 400
        assert [tuple(detail["loc"]) for detail in response.get_json()["details"]] == [("email",)]
