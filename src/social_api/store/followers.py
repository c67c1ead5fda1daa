"""Follower graph repository."""

import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError

from social_api.models.follower import Follower
from social_api.store.base import Repository, constraint_violated
from social_api.store.errors import ConflictError, InternalError, SelfFollowError

logger = logging.getLogger(__name__)


class FollowerRepository(Repository):
    """Directed follow edges between users."""

    async def follow(self, follower_id: int, user_id: int) -> None:
        """Make ``follower_id`` follow ``user_id``.

        Raises:
            SelfFollowError: If both ids are the same user.
            ConflictError: If the edge already exists.
            InternalError: For any other failure (e.g. an unknown user).
        """
        if follower_id == user_id:
            raise SelfFollowError()

        async with self.transaction("follow user") as session:
            try:
                await session.execute(
                    insert(Follower).values(user_id=user_id, follower_id=follower_id)
                )
            except IntegrityError as e:
                if constraint_violated(
                    e, "pk_followers", "followers.user_id", "followers.follower_id"
                ):
                    raise ConflictError(f"User {follower_id} already follows {user_id}") from e
                logger.error(
                    "Could not create follow edge %s -> %s", follower_id, user_id, exc_info=e
                )
                raise InternalError() from e

    async def unfollow(self, follower_id: int, user_id: int) -> None:
        """Remove the edge if present; a missing edge is not an error."""
        async with self.transaction("unfollow user") as session:
            result = await session.execute(
                delete(Follower).where(
                    Follower.follower_id == follower_id,
                    Follower.user_id == user_id,
                )
            )
        if result.rowcount == 0:
            logger.debug("No follow edge %s -> %s to remove", follower_id, user_id)

    async def is_following(self, follower_id: int, user_id: int) -> bool:
        """Tell whether ``follower_id`` currently follows ``user_id``."""
        async with self.transaction("check follow edge") as session:
            result = await session.execute(
                select(Follower.user_id).where(
                    Follower.follower_id == follower_id,
                    Follower.user_id == user_id,
                )
            )
            return result.first() is not None
