"""Invitation and account activation workflow.

Both operations are single atomic units:

* ``create_and_invite`` inserts an inactive user and its invitation.
* ``activate`` flips the user to active and consumes the invitation.

A failure at any step rolls the whole unit back, so an activated user never
coexists with a usable invitation and a half-created user never persists.
"""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from social_api.config import StorageConfig
from social_api.models.invitation import UserInvitation
from social_api.models.user import User
from social_api.store.base import Repository
from social_api.store.errors import InternalError, NotFoundError
from social_api.store.users import UserRepository
from social_api.utils.security import hash_token

logger = logging.getLogger(__name__)


class InvitationRepository(Repository):
    """Invitation-based account activation."""

    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        config: StorageConfig,
        users: UserRepository,
    ) -> None:
        super().__init__(sessions, config)
        self._users = users

    async def create_and_invite(
        self,
        *,
        username: str,
        email: str,
        password: str,
        token: str,
        ttl: timedelta | None = None,
    ) -> User:
        """Create an inactive user together with its invitation.

        Args:
            username: Requested username.
            email: Requested email address.
            password: Plain text password, hashed before storage.
            token: Raw invitation token; only its digest is stored.
            ttl: Invitation lifetime. Defaults to the configured TTL.

        Returns:
            The new (inactive) user.

        Raises:
            DuplicateEmailError: If the email is already registered.
            DuplicateUsernameError: If the username is already taken.
            InternalError: For any other failure; nothing is persisted.
        """
        if ttl is None:
            ttl = self.config.invitation_ttl
        expiry = datetime.now(UTC) + ttl

        async with self.transaction("create and invite user") as session:
            user = await self._users.insert(
                session, username=username, email=email, password=password
            )
            await self._insert_invitation(session, user_id=user.id, token=token, expiry=expiry)

        logger.info("Created user %s with invitation expiring %s", user.id, expiry.isoformat())
        return user

    async def _insert_invitation(
        self, session: AsyncSession, *, user_id: int, token: str, expiry: datetime
    ) -> None:
        session.add(UserInvitation(token=hash_token(token), user_id=user_id, expiry=expiry))
        try:
            await session.flush()
        except IntegrityError as e:
            logger.error("Could not store invitation for user %s", user_id, exc_info=e)
            raise InternalError() from e

    async def activate(self, token: str) -> User:
        """Activate the user owning a valid, unexpired invitation token.

        Returns:
            The activated user.

        Raises:
            NotFoundError: If the token is unknown or expired. Nothing changes.
        """
        async with self.transaction("activate user") as session:
            query = (
                select(User)
                .join(UserInvitation, UserInvitation.user_id == User.id)
                .where(
                    UserInvitation.token == hash_token(token),
                    UserInvitation.expiry > datetime.now(UTC),
                )
                .with_for_update()
            )
            result = await session.execute(query)
            user = result.scalar_one_or_none()
            if user is None:
                raise NotFoundError("Invitation not found or expired")

            user.is_active = True
            await session.flush()

            await session.execute(delete(UserInvitation).where(UserInvitation.user_id == user.id))

        logger.info("Activated user %s", user.id)
        return user

    async def has_invitation(self, user_id: int) -> bool:
        """Tell whether the user still has a pending invitation."""
        async with self.transaction("check invitation") as session:
            result = await session.execute(
                select(UserInvitation.token).where(UserInvitation.user_id == user_id)
            )
            return result.first() is not None
