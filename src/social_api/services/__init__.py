"""Outbound integrations used by the HTTP adapters."""

from social_api.services.mailer import (
    MailError,
    SendGridMailer,
    build_mailer,
    get_mailer,
    render_invitation,
)

__all__ = [
    "MailError",
    "SendGridMailer",
    "build_mailer",
    "get_mailer",
    "render_invitation",
]
