"""Tests for the follower graph repository."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from social_api.models import Follower
from social_api.store import ConflictError, InternalError, SelfFollowError, Storage


async def count_edges(sessions: async_sessionmaker[AsyncSession], follower_id: int, user_id: int):
    async with sessions() as session:
        result = await session.execute(
            select(func.count())
            .select_from(Follower)
            .where(Follower.follower_id == follower_id, Follower.user_id == user_id)
        )
        return result.scalar_one()


class TestFollow:
    """Tests for creating follow edges."""

    async def test_follow(self, storage: Storage, make_user) -> None:
        """Test that following creates the directed edge."""
        alice = await make_user("alice")
        bob = await make_user("bob")

        await storage.followers.follow(alice.id, bob.id)

        assert await storage.followers.is_following(alice.id, bob.id)
        assert not await storage.followers.is_following(bob.id, alice.id)

    async def test_follow_twice_conflicts(
        self, storage: Storage, sessions: async_sessionmaker[AsyncSession], make_user
    ) -> None:
        """Test that a duplicate edge is a conflict and only one row exists."""
        alice = await make_user("alice")
        bob = await make_user("bob")
        await storage.followers.follow(alice.id, bob.id)

        with pytest.raises(ConflictError):
            await storage.followers.follow(alice.id, bob.id)

        assert await count_edges(sessions, alice.id, bob.id) == 1

    async def test_self_follow_rejected(self, storage: Storage, make_user) -> None:
        """Test that a user cannot follow themself."""
        alice = await make_user("alice")

        with pytest.raises(SelfFollowError):
            await storage.followers.follow(alice.id, alice.id)

    async def test_follow_unknown_user_is_internal(self, storage: Storage, make_user) -> None:
        """Test that a foreign key violation is not reported as a conflict."""
        alice = await make_user("alice")

        with pytest.raises(InternalError):
            await storage.followers.follow(alice.id, 999)


class TestUnfollow:
    """Tests for removing follow edges."""

    async def test_unfollow(
        self, storage: Storage, sessions: async_sessionmaker[AsyncSession], make_user
    ) -> None:
        """Test that unfollowing removes the edge."""
        alice = await make_user("alice")
        bob = await make_user("bob")
        await storage.followers.follow(alice.id, bob.id)

        await storage.followers.unfollow(alice.id, bob.id)

        assert await count_edges(sessions, alice.id, bob.id) == 0

    async def test_unfollow_missing_edge_is_noop(
        self, storage: Storage, sessions: async_sessionmaker[AsyncSession], make_user
    ) -> None:
        """Test that removing a non-existent edge succeeds without changes."""
        alice = await make_user("alice")
        bob = await make_user("bob")
        await storage.followers.follow(bob.id, alice.id)

        await storage.followers.unfollow(alice.id, bob.id)

        assert await count_edges(sessions, bob.id, alice.id) == 1

    async def test_refollow_after_unfollow(self, storage: Storage, make_user) -> None:
        """Test that an edge can be recreated after removal."""
        alice = await make_user("alice")
        bob = await make_user("bob")
        await storage.followers.follow(alice.id, bob.id)
        await storage.followers.unfollow(alice.id, bob.id)

        await storage.followers.follow(alice.id, bob.id)

        assert await storage.followers.is_following(alice.id, bob.id)
