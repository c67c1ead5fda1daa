"""User repository."""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.models.user import User
from social_api.store.base import Repository, constraint_violated
from social_api.store.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InternalError,
    NotFoundError,
    StoreError,
)
from social_api.utils.security import hash_password

logger = logging.getLogger(__name__)


def classify_user_conflict(exc: IntegrityError) -> StoreError:
    """Map a failed user insert to the specific duplicate kind."""
    if constraint_violated(exc, "uq_users_email", "users.email"):
        return DuplicateEmailError()
    if constraint_violated(exc, "uq_users_username", "users.username"):
        return DuplicateUsernameError()
    logger.error("Unexpected integrity error while creating user", exc_info=exc)
    return InternalError()


class UserRepository(Repository):
    """Accounts: creation with hashed passwords and lookups."""

    async def create(self, *, username: str, email: str, password: str) -> User:
        """Create an inactive user.

        Returns:
            The stored user with its assigned id and creation timestamp.

        Raises:
            DuplicateEmailError: If the email is already registered.
            DuplicateUsernameError: If the username is already taken.
            InternalError: For any other persistence failure.
        """
        async with self.transaction("create user") as session:
            return await self.insert(session, username=username, email=email, password=password)

    async def insert(
        self, session: AsyncSession, *, username: str, email: str, password: str
    ) -> User:
        """Insert a user inside a transaction owned by the caller."""
        # bcrypt is CPU bound; keep it off the event loop
        hashed_password = await asyncio.to_thread(hash_password, password)
        user = User(
            username=username,
            email=email,
            hashed_password=hashed_password,
            is_active=False,
        )
        session.add(user)
        try:
            await session.flush()
        except IntegrityError as e:
            raise classify_user_conflict(e) from e
        await session.refresh(user)
        return user

    async def get(self, user_id: int) -> User:
        """Fetch a user by id.

        Raises:
            NotFoundError: If no user has this id.
        """
        async with self.transaction("get user") as session:
            user = await session.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def get_by_email(self, email: str) -> User:
        """Fetch a user by email address.

        Raises:
            NotFoundError: If no user has this email.
        """
        async with self.transaction("get user by email") as session:
            result = await session.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found")
        return user
