"""Tests for the post repository."""

import asyncio
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from social_api.config import Settings, StorageConfig
from social_api.database import create_engine, create_schema, create_session_factory
from social_api.models import Comment, PostTag
from social_api.store import NotFoundError, Storage, VersionConflictError


@pytest.fixture
async def author(make_user):
    return await make_user("alice")


class TestCreatePost:
    """Tests for post creation."""

    async def test_create_post(self, storage: Storage, author) -> None:
        """Test that a new post starts at version 1 with timestamps set."""
        post = await storage.posts.create(
            user_id=author.id, title="Hello", content="First post", tags=["python", "sql"]
        )

        assert post.id > 0
        assert post.version == 1
        assert post.created_at is not None
        assert post.updated_at is not None
        assert post.tags == ["python", "sql"]

    async def test_tags_keep_order_and_drop_duplicates(self, storage: Storage, author) -> None:
        """Test that tags behave as an ordered set."""
        post = await storage.posts.create(
            user_id=author.id, title="Hello", content="Body", tags=["sql", "python", "sql"]
        )

        fetched = await storage.posts.get_by_id(post.id)

        assert fetched.tags == ["sql", "python"]

    async def test_create_without_tags(self, storage: Storage, author) -> None:
        """Test that tags are optional."""
        post = await storage.posts.create(user_id=author.id, title="Hello", content="Body")

        assert post.tags == []


class TestGetPost:
    """Tests for post lookups."""

    async def test_get_by_id(self, storage: Storage, author) -> None:
        """Test fetching a post by id."""
        post = await storage.posts.create(user_id=author.id, title="Hello", content="Body")

        fetched = await storage.posts.get_by_id(post.id)

        assert fetched.title == "Hello"
        assert fetched.user_id == author.id

    async def test_get_missing(self, storage: Storage) -> None:
        """Test that an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await storage.posts.get_by_id(999)


class TestUpdatePost:
    """Tests for optimistic concurrency on updates."""

    async def test_update_with_current_version(self, storage: Storage, author) -> None:
        """Test that a matching version updates and increments by one."""
        post = await storage.posts.create(user_id=author.id, title="Hello", content="Body")

        new_version = await storage.posts.update(
            post.id, title="Hello again", content="Edited", version=1
        )

        assert new_version == 2
        fetched = await storage.posts.get_by_id(post.id)
        assert fetched.title == "Hello again"
        assert fetched.content == "Edited"
        assert fetched.version == 2

    async def test_sequential_updates(self, storage: Storage, author) -> None:
        """Test that each update bumps the version exactly once."""
        post = await storage.posts.create(user_id=author.id, title="Hello", content="Body")

        v2 = await storage.posts.update(post.id, title="a", content="a", version=1)
        v3 = await storage.posts.update(post.id, title="b", content="b", version=v2)

        assert (v2, v3) == (2, 3)

    async def test_stale_version_rejected(self, storage: Storage, author) -> None:
        """Test that a stale version fails and leaves the row unchanged."""
        post = await storage.posts.create(user_id=author.id, title="Hello", content="Body")
        await storage.posts.update(post.id, title="Winner", content="First writer", version=1)

        with pytest.raises(VersionConflictError):
            await storage.posts.update(post.id, title="Loser", content="Second writer", version=1)

        fetched = await storage.posts.get_by_id(post.id)
        assert fetched.title == "Winner"
        assert fetched.version == 2

    async def test_update_missing_post(self, storage: Storage) -> None:
        """Test that updating a post that never existed raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await storage.posts.update(999, title="x", content="y", version=1)


class TestDeletePost:
    """Tests for post deletion."""

    async def test_delete(self, storage: Storage, author) -> None:
        """Test that a deleted post can no longer be fetched."""
        post = await storage.posts.create(user_id=author.id, title="Hello", content="Body")

        await storage.posts.delete(post.id)

        with pytest.raises(NotFoundError):
            await storage.posts.get_by_id(post.id)

    async def test_delete_missing(self, storage: Storage) -> None:
        """Test that deleting an unknown post raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await storage.posts.delete(999)

    async def test_delete_cascades(
        self, storage: Storage, sessions: async_sessionmaker[AsyncSession], author
    ) -> None:
        """Test that tags and comments go away with the post."""
        post = await storage.posts.create(
            user_id=author.id, title="Hello", content="Body", tags=["python"]
        )
        await storage.comments.create(post_id=post.id, user_id=author.id, content="Nice")

        await storage.posts.delete(post.id)

        async with sessions() as session:
            tags = await session.scalar(select(func.count()).select_from(PostTag))
            comments = await session.scalar(select(func.count()).select_from(Comment))
        assert (tags, comments) == (0, 0)


@pytest.fixture
async def file_storage(tmp_path) -> AsyncGenerator[Storage]:
    """Storage over a file-backed database, so each transaction gets its own connection."""
    engine = create_engine(Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'posts.db'}"))
    await create_schema(engine)
    yield Storage(create_session_factory(engine), StorageConfig())
    await engine.dispose()


class TestConcurrentUpdates:
    """Tests for writers racing on the same version."""

    async def test_only_one_writer_wins(self, file_storage: Storage) -> None:
        """Test that two updates from the same version cannot both apply."""
        author = await file_storage.users.create(
            username="alice", email="alice@example.com", password="securepassword123"
        )
        post = await file_storage.posts.create(user_id=author.id, title="Hello", content="Body")

        results = await asyncio.gather(
            file_storage.posts.update(post.id, title="A", content="first", version=1),
            file_storage.posts.update(post.id, title="B", content="second", version=1),
            return_exceptions=True,
        )

        winners = [r for r in results if r == 2]
        losers = [r for r in results if isinstance(r, VersionConflictError)]
        assert len(winners) == 1
        assert len(losers) == 1

        fetched = await file_storage.posts.get_by_id(post.id)
        assert fetched.version == 2
        assert fetched.title in {"A", "B"}
