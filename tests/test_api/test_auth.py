"""Tests for registration and activation API endpoints."""

from typing import Any

import pytest
from httpx import AsyncClient

from social_api.main import app
from social_api.services.mailer import MailError, get_mailer
from social_api.store import Storage


class FakeMailer:
    """Records invitations instead of sending them."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[dict[str, str]] = []

    async def __aenter__(self) -> "FakeMailer":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None

    async def send_invitation(self, *, username: str, email: str, activation_url: str) -> int:
        if self.fail:
            raise MailError("SendGrid is down", status_code=503)
        self.sent.append({"username": username, "email": email, "url": activation_url})
        return 202


@pytest.fixture
def mailer(client: AsyncClient) -> FakeMailer:
    """Install a recording mailer for the duration of a test."""
    fake = FakeMailer()
    app.dependency_overrides[get_mailer] = lambda: fake
    return fake


REGISTRATION = {
    "username": "newuser",
    "email": "newuser@example.com",
    "password": "securepassword123",
}


class TestRegister:
    """Tests for user registration endpoint."""

    async def test_register_success(self, client: AsyncClient) -> None:
        """Test that registration creates an inactive user."""
        response = await client.post("/v1/authentication/user", json=REGISTRATION)

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "newuser"
        assert data["email"] == "newuser@example.com"
        assert data["is_active"] is False
        assert "password" not in data
        assert "hashed_password" not in data

    async def test_register_creates_invitation(
        self, client: AsyncClient, storage: Storage
    ) -> None:
        """Test that the user and its invitation are stored together."""
        response = await client.post("/v1/authentication/user", json=REGISTRATION)

        assert await storage.invitations.has_invitation(response.json()["id"])

    async def test_register_duplicate_username(self, client: AsyncClient) -> None:
        """Test registration with an existing username."""
        await client.post("/v1/authentication/user", json=REGISTRATION)

        response = await client.post(
            "/v1/authentication/user",
            json={**REGISTRATION, "email": "other@example.com"},
        )

        assert response.status_code == 409
        assert "username" in response.json()["detail"].lower()

    async def test_register_duplicate_email(self, client: AsyncClient) -> None:
        """Test registration with an existing email."""
        await client.post("/v1/authentication/user", json=REGISTRATION)

        response = await client.post(
            "/v1/authentication/user",
            json={**REGISTRATION, "username": "otheruser"},
        )

        assert response.status_code == 409
        assert "email" in response.json()["detail"].lower()

    async def test_register_invalid_email(self, client: AsyncClient) -> None:
        """Test registration with invalid email format."""
        response = await client.post(
            "/v1/authentication/user",
            json={**REGISTRATION, "email": "not-an-email"},
        )

        assert response.status_code == 422

    async def test_register_short_password(self, client: AsyncClient) -> None:
        """Test registration with password too short."""
        response = await client.post(
            "/v1/authentication/user",
            json={**REGISTRATION, "password": "short"},
        )

        assert response.status_code == 422

    async def test_register_invalid_username_chars(self, client: AsyncClient) -> None:
        """Test registration with invalid username characters."""
        response = await client.post(
            "/v1/authentication/user",
            json={**REGISTRATION, "username": "user@name"},
        )

        assert response.status_code == 422


class TestActivation:
    """Tests for the invitation email and account activation."""

    async def test_invitation_sent_and_activates(
        self, client: AsyncClient, storage: Storage, mailer: FakeMailer
    ) -> None:
        """Test the full register, email, activate flow."""
        response = await client.post("/v1/authentication/user", json=REGISTRATION)
        user_id = response.json()["id"]

        assert len(mailer.sent) == 1
        invitation = mailer.sent[0]
        assert invitation["email"] == "newuser@example.com"
        token = invitation["url"].rsplit("/", 1)[-1]

        response = await client.put(f"/v1/users/activate/{token}")
        assert response.status_code == 204

        user = await storage.users.get(user_id)
        assert user.is_active is True
        assert not await storage.invitations.has_invitation(user_id)

    async def test_token_is_single_use(self, client: AsyncClient, mailer: FakeMailer) -> None:
        """Test that a consumed token cannot activate again."""
        await client.post("/v1/authentication/user", json=REGISTRATION)
        token = mailer.sent[0]["url"].rsplit("/", 1)[-1]

        first = await client.put(f"/v1/users/activate/{token}")
        second = await client.put(f"/v1/users/activate/{token}")

        assert first.status_code == 204
        assert second.status_code == 404

    async def test_unknown_token(self, client: AsyncClient) -> None:
        """Test activation with a token that was never issued."""
        response = await client.put("/v1/users/activate/not-a-real-token")

        assert response.status_code == 404

    async def test_mail_failure_keeps_registration(
        self, client: AsyncClient, storage: Storage, mailer: FakeMailer
    ) -> None:
        """Test that a failed delivery leaves the new user and invitation in place."""
        mailer.fail = True

        response = await client.post("/v1/authentication/user", json=REGISTRATION)

        assert response.status_code == 201
        user_id = response.json()["id"]
        user = await storage.users.get(user_id)
        assert user.username == "newuser"
        assert await storage.invitations.has_invitation(user_id)
