"""HTTP client that mirrors the server's view of the logged-in user.

``UserClient`` keeps the session cookie in its httpx cookie jar and a local
copy of the user (and, for admins, of all users). After each mutating call
it re-fetches whatever state the call may have changed.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class UserClientError(Exception):
    """A request was rejected locally or by the server."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UserClient:
    """Client for the account API."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http: httpx.Client | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.user: dict[str, Any] = {}
        self.all_users: list[dict[str, Any]] = []
        self.loading = False

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "UserClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            UserClientError: for any non-2xx response, carrying the server's message.
        """
        self.loading = True
        try:
            response = self.http.request(method, f"/api/v1{path}", **kwargs)
        finally:
            self.loading = False

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get("message") if isinstance(body, dict) else None
            logger.warning(f"{method} {path} failed with {response.status_code}: {message}")
            raise UserClientError(message or response.reason_phrase, response.status_code)

        return response.json()

    def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        """Create an account. The server also starts a session."""
        if "@" not in email or not password or len(password) < MIN_PASSWORD_LENGTH:
            raise UserClientError(
                f"Please enter a valid email and password (min {MIN_PASSWORD_LENGTH} characters)"
            )
        return self._request(
            "POST", "/register", json={"name": name, "email": email, "password": password}
        )

    def login(self, email: str, password: str) -> dict[str, Any]:
        """Log in and load the user's profile."""
        self._request("POST", "/login", json={"email": email, "password": password})
        return self.get_user()

    def login_status(self) -> bool:
        """Check whether the stored session cookie is still valid."""
        try:
            return bool(self._request("GET", "/login-status"))
        except UserClientError as e:
            if e.status_code == 401:
                return False
            raise

    def logout(self) -> None:
        """End the session and forget local state."""
        self._request("GET", "/logout")
        self.user = {}
        self.all_users = []

    def get_user(self) -> dict[str, Any]:
        """Fetch the current user and merge it into local state."""
        self.user = {**self.user, **self._request("GET", "/user")}
        return self.user

    def update_user(self, **fields: str) -> dict[str, Any]:
        """Update profile fields (name, bio, photo)."""
        self.user = {**self.user, **self._request("PATCH", "/user", json=fields)}
        return self.user

    def email_verification(self) -> str:
        """Ask the server to email a verification link."""
        return self._request("POST", "/verify-email")["message"]

    def verify_user(self, token: str) -> dict[str, Any]:
        """Complete verification with the token from the emailed link."""
        self._request("POST", f"/verify-user/{token}")
        return self.get_user()

    def forgot_password(self, email: str) -> str:
        """Ask the server to email a password reset link."""
        return self._request("POST", "/forgot-password", json={"email": email})["message"]

    def reset_password(self, token: str, password: str) -> str:
        """Set a new password with the token from a reset link."""
        return self._request("POST", f"/reset-password/{token}", json={"password": password})[
            "message"
        ]

    def change_password(self, current_password: str, new_password: str) -> str:
        """Change the logged-in user's password."""
        return self._request(
            "PATCH",
            "/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )["message"]

    def get_all_users(self) -> list[dict[str, Any]]:
        """Admin only: load every user."""
        self.all_users = self._request("GET", "/admin/users")
        return self.all_users

    def delete_user(self, user_id: int) -> list[dict[str, Any]]:
        """Admin only: delete a user, then reload the user list."""
        self._request("DELETE", f"/admin/users/{user_id}")
        return self.get_all_users()

    def sync(self) -> dict[str, Any]:
        """Load the user if logged in, and all users if that user is an admin."""
        if not self.login_status():
            self.user = {}
            return self.user
        self.get_user()
        if self.user.get("role") == "admin":
            self.get_all_users()
        return self.user
