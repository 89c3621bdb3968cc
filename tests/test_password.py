"""Tests for password reset and password change."""

from datetime import UTC, datetime, timedelta

from src.models.enums import TokenPurpose
from src.models.token import Token


class TestForgotPassword:
    """Tests for requesting a reset link."""

    def test_sends_reset_link(self, client, make_user, outbox, db):
        make_user("forgot@example.com", name="Forgetful")
        response = client.post("/api/v1/forgot-password", json={"email": "forgot@example.com"})
        assert response.status_code == 200
        assert response.json() == {"message": "Email sent"}

        email = outbox.sent[-1]
        assert email["template"] == "forgot_password"
        assert email["to"] == "forgot@example.com"
        assert email["name"] == "Forgetful"
        assert email["subject"].startswith("Password Reset")
        assert email["url"].startswith("http://localhost:3000/reset-password/")

        token = db.query(Token).one()
        assert token.purpose == TokenPurpose.PASSWORD_RESET
        assert token.expires_at - token.created_at == timedelta(hours=1)

    def test_email_required(self, client):
        response = client.post("/api/v1/forgot-password", json={})
        assert response.status_code == 400
        assert response.json() == {"message": "Email is required"}

    def test_unknown_email(self, client, outbox):
        response = client.post("/api/v1/forgot-password", json={"email": "ghost@example.com"})
        assert response.status_code == 404
        assert response.json() == {"message": "User not found"}
        assert outbox.sent == []

    def test_send_failure(self, client, make_user, outbox):
        make_user("forgot@example.com")
        outbox.fail = True
        response = client.post("/api/v1/forgot-password", json={"email": "forgot@example.com"})
        assert response.status_code == 500
        assert response.json() == {"message": "Email could not be sent"}

    def test_reset_does_not_cancel_pending_verification(self, client, registered_user, db):
        client.post("/api/v1/verify-email")
        client.post("/api/v1/forgot-password", json={"email": registered_user["email"]})
        purposes = {token.purpose for token in db.query(Token).all()}
        assert purposes == {TokenPurpose.VERIFICATION, TokenPurpose.PASSWORD_RESET}


class TestResetPassword:
    """Tests for completing a reset."""

    def test_reset_password(self, client, make_user, login, outbox, db):
        make_user("reset@example.com", password="oldpassword")
        client.post("/api/v1/forgot-password", json={"email": "reset@example.com"})

        response = client.post(
            f"/api/v1/reset-password/{outbox.last_token}", json={"password": "newpassword"}
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Password reset successfully"}
        assert db.query(Token).count() == 0

        login("reset@example.com", "newpassword")
        old = client.post(
            "/api/v1/login", json={"email": "reset@example.com", "password": "oldpassword"}
        )
        assert old.status_code == 400

    def test_reset_token_is_single_use(self, client, make_user, outbox):
        make_user("reset@example.com")
        client.post("/api/v1/forgot-password", json={"email": "reset@example.com"})
        token = outbox.last_token

        first = client.post(f"/api/v1/reset-password/{token}", json={"password": "newpassword"})
        assert first.status_code == 200
        second = client.post(f"/api/v1/reset-password/{token}", json={"password": "another1"})
        assert second.status_code == 400
        assert second.json() == {"message": "Invalid or expired reset token"}

    def test_second_request_invalidates_first(self, client, make_user, outbox):
        make_user("reset@example.com")
        client.post("/api/v1/forgot-password", json={"email": "reset@example.com"})
        first = outbox.last_token
        client.post("/api/v1/forgot-password", json={"email": "reset@example.com"})

        response = client.post(f"/api/v1/reset-password/{first}", json={"password": "newpassword"})
        assert response.status_code == 400

    def test_expired_token(self, client, make_user, outbox, db):
        make_user("reset@example.com")
        client.post("/api/v1/forgot-password", json={"email": "reset@example.com"})
        token = db.query(Token).one()
        token.expires_at = datetime.now(UTC) - timedelta(minutes=1)
        db.commit()

        response = client.post(
            f"/api/v1/reset-password/{outbox.last_token}", json={"password": "newpassword"}
        )
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid or expired reset token"}

    def test_password_required(self, client):
        response = client.post("/api/v1/reset-password/whatever", json={})
        assert response.status_code == 400
        assert response.json() == {"message": "Password is required"}

    def test_short_password(self, client, make_user, outbox):
        make_user("reset@example.com")
        client.post("/api/v1/forgot-password", json={"email": "reset@example.com"})
        response = client.post(
            f"/api/v1/reset-password/{outbox.last_token}", json={"password": "123"}
        )
        assert response.status_code == 400
        assert response.json() == {"message": "Password must be at least 6 characters long"}


class TestChangePassword:
    """Tests for changing the password while logged in."""

    def test_change_password(self, client, registered_user, login):
        response = client.patch(
            "/api/v1/change-password",
            json={"currentPassword": "testpass123", "newPassword": "brandnew123"},
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Password saved successfully"}

        login(registered_user["email"], "brandnew123")

    def test_wrong_current_password(self, client, registered_user, login):
        response = client.patch(
            "/api/v1/change-password",
            json={"currentPassword": "wrong-one", "newPassword": "brandnew123"},
        )
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid password"}

        login(registered_user["email"], "testpass123")

    def test_missing_fields(self, client, registered_user):
        response = client.patch("/api/v1/change-password", json={"currentPassword": "testpass123"})
        assert response.status_code == 400
        assert response.json() == {"message": "All fields are required"}

    def test_requires_login(self, client):
        response = client.patch(
            "/api/v1/change-password",
            json={"currentPassword": "testpass123", "newPassword": "brandnew123"},
        )
        assert response.status_code == 401
