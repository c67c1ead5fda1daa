"""Invitation mail delivery through the SendGrid v3 HTTP API."""

import asyncio
import logging
from typing import Any

import httpx

from social_api.config import Settings, get_settings

logger = logging.getLogger(__name__)


class MailError(Exception):
    """Raised when a message could not be delivered."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def render_invitation(username: str, activation_url: str, app_name: str) -> tuple[str, str]:
    """Build the subject and HTML body of an invitation email."""
    subject = f"Finish registration with {app_name}"
    body = (
        f"<p>Hi {username},</p>"
        f"<p>Thanks for signing up for {app_name}. "
        f'Please <a href="{activation_url}">activate your account</a> to get started.</p>'
        "<p>If you did not sign up, you can safely ignore this email.</p>"
    )
    return subject, body


class SendGridMailer:
    """Client for the SendGrid mail send endpoint.

    Transient failures (network errors, 429 and 5xx responses) are retried up
    to ``max_retries`` attempts with a linearly growing delay. Other 4xx
    responses fail immediately.
    """

    def __init__(
        self,
        api_key: str,
        from_email: str,
        from_name: str = "Social",
        base_url: str = "https://api.sendgrid.com/v3",
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 10.0,
        sandbox: bool = False,
    ) -> None:
        """Initialize the mailer.

        Args:
            api_key: SendGrid API key.
            from_email: Sender address.
            from_name: Sender display name.
            base_url: SendGrid API base URL.
            max_retries: Total number of delivery attempts.
            retry_delay: Base delay between attempts in seconds.
            timeout: Request timeout in seconds.
            sandbox: Ask SendGrid to validate without delivering.
        """
        if not api_key:
            raise ValueError("SendGrid API key is required")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self._api_key = api_key
        self.from_email = from_email
        self.from_name = from_name
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.sandbox = sandbox
        self._client: httpx.AsyncClient | None = None

    @property
    def default_headers(self) -> dict[str, str]:
        """Return default headers including Bearer token authentication."""
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.default_headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _build_message(
        self, to_email: str, to_name: str, subject: str, html_body: str
    ) -> dict[str, Any]:
        return {
            "personalizations": [{"to": [{"email": to_email, "name": to_name}]}],
            "from": {"email": self.from_email, "name": self.from_name},
            "subject": subject,
            "content": [{"type": "text/html", "value": html_body}],
            "mail_settings": {"sandbox_mode": {"enable": self.sandbox}},
        }

    async def send(self, *, to_email: str, to_name: str, subject: str, html_body: str) -> int:
        """Send one message.

        Returns:
            The HTTP status code SendGrid accepted the message with.

        Raises:
            MailError: If every attempt failed or SendGrid rejected the message.
        """
        message = self._build_message(to_email, to_name, subject, html_body)
        client = await self._get_client()
        last_error = "no attempt made"

        for attempt in range(1, self.max_retries + 1):
            try:
                response = await client.request("POST", "mail/send", json=message)
            except httpx.RequestError as e:
                last_error = f"request failed: {e}"
            else:
                if response.status_code < 400:
                    return response.status_code
                if response.status_code != 429 and response.status_code < 500:
                    raise MailError(
                        f"SendGrid rejected message: {response.text}",
                        status_code=response.status_code,
                    )
                last_error = f"HTTP {response.status_code}"

            logger.warning(
                "Mail delivery attempt %d/%d failed: %s", attempt, self.max_retries, last_error
            )
            if attempt < self.max_retries:
                await asyncio.sleep(self.retry_delay * attempt)

        raise MailError(f"Failed to send email after {self.max_retries} attempts: {last_error}")

    async def send_invitation(self, *, username: str, email: str, activation_url: str) -> int:
        """Send the account activation email."""
        subject, body = render_invitation(username, activation_url, self.from_name)
        return await self.send(to_email=email, to_name=username, subject=subject, html_body=body)

    async def __aenter__(self) -> "SendGridMailer":
        """Async context manager entry."""
        await self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()


def build_mailer(settings: Settings) -> SendGridMailer | None:
    """Create the mailer from settings, or None when mail is not configured."""
    if not settings.sendgrid_api_key:
        return None
    return SendGridMailer(
        api_key=settings.sendgrid_api_key,
        from_email=settings.mail_from_email,
        from_name=settings.mail_from_name,
        base_url=settings.sendgrid_base_url,
        max_retries=settings.mail_max_retries,
        sandbox=settings.mail_sandbox,
    )


async def get_mailer() -> SendGridMailer | None:
    """Factory function to create the invitation mailer.

    Can be used as a FastAPI dependency.
    """
    return build_mailer(get_settings())
