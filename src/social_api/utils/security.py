"""Security utilities for password hashing and invitation tokens."""

import hashlib
import secrets

import bcrypt


def hash_password(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password."""
    password_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(password_bytes, hashed_bytes)


def generate_invitation_token() -> str:
    """Create a random, URL-safe activation token to send to a new user."""
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    """Return the hex SHA-512 digest stored in place of a raw invitation token."""
    return hashlib.sha512(token.encode("utf-8")).hexdigest()
