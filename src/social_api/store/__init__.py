"""Storage layer: one repository per entity behind narrow capability protocols."""

from collections.abc import Iterable
from datetime import timedelta
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from social_api.config import StorageConfig
from social_api.models import Comment, Post, User
from social_api.schemas.feed import FeedQuery
from social_api.store.comments import CommentRepository
from social_api.store.errors import (
    ConflictError,
    DuplicateEmailError,
    DuplicateUsernameError,
    InternalError,
    NotFoundError,
    SelfFollowError,
    StoreError,
    VersionConflictError,
)
from social_api.store.feed import FeedEntry, FeedRepository
from social_api.store.followers import FollowerRepository
from social_api.store.invitations import InvitationRepository
from social_api.store.posts import PostRepository
from social_api.store.users import UserRepository


class UserStore(Protocol):
    async def create(self, *, username: str, email: str, password: str) -> User: ...

    async def get(self, user_id: int) -> User: ...

    async def get_by_email(self, email: str) -> User: ...


class InvitationStore(Protocol):
    async def create_and_invite(
        self,
        *,
        username: str,
        email: str,
        password: str,
        token: str,
        ttl: timedelta | None = None,
    ) -> User: ...

    async def activate(self, token: str) -> User: ...

    async def has_invitation(self, user_id: int) -> bool: ...


class FollowerStore(Protocol):
    async def follow(self, follower_id: int, user_id: int) -> None: ...

    async def unfollow(self, follower_id: int, user_id: int) -> None: ...

    async def is_following(self, follower_id: int, user_id: int) -> bool: ...


class PostStore(Protocol):
    async def create(
        self, *, user_id: int, title: str, content: str, tags: Iterable[str] = ()
    ) -> Post: ...

    async def get_by_id(self, post_id: int) -> Post: ...

    async def update(self, post_id: int, *, title: str, content: str, version: int) -> int: ...

    async def delete(self, post_id: int) -> None: ...


class CommentStore(Protocol):
    async def create(self, *, post_id: int, user_id: int, content: str) -> Comment: ...

    async def get_by_post_id(self, post_id: int) -> list[Comment]: ...


class FeedStore(Protocol):
    async def get_user_feed(self, user_id: int, query: FeedQuery) -> list[FeedEntry]: ...


class Storage:
    """Aggregate owning one concrete repository per entity.

    Each repository shares the session factory and the explicit storage
    configuration; attributes are typed by capability so callers (and tests)
    can swap any one of them.
    """

    users: UserStore
    invitations: InvitationStore
    followers: FollowerStore
    posts: PostStore
    comments: CommentStore
    feed: FeedStore

    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        config: StorageConfig | None = None,
    ) -> None:
        self.config = config or StorageConfig()
        users = UserRepository(sessions, self.config)
        self.users = users
        self.invitations = InvitationRepository(sessions, self.config, users)
        self.followers = FollowerRepository(sessions, self.config)
        self.posts = PostRepository(sessions, self.config)
        self.comments = CommentRepository(sessions, self.config)
        self.feed = FeedRepository(sessions, self.config)


__all__ = [
    "CommentStore",
    "ConflictError",
    "DuplicateEmailError",
    "DuplicateUsernameError",
    "FeedEntry",
    "FeedStore",
    "FollowerStore",
    "InternalError",
    "InvitationStore",
    "NotFoundError",
    "PostStore",
    "SelfFollowError",
    "Storage",
    "StoreError",
    "UserStore",
    "VersionConflictError",
]
