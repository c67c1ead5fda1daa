"""Feed query engine."""

from dataclasses import dataclass

from sqlalchemy import asc, desc, func, or_, select

from social_api.models.comment import Comment
from social_api.models.follower import Follower
from social_api.models.post import Post, PostTag
from social_api.models.user import User
from social_api.schemas.feed import FeedQuery
from social_api.store.base import Repository

# Ordering direction cannot be a bound parameter, so it goes through this allow-list
SORT_DIRECTIONS = {"asc": asc, "desc": desc}


@dataclass(frozen=True)
class FeedEntry:
    """One row of a user's feed."""

    post: Post
    author_username: str
    comments_count: int


class FeedRepository(Repository):
    """Aggregates posts of a user and of everyone they follow."""

    async def get_user_feed(self, user_id: int, query: FeedQuery) -> list[FeedEntry]:
        """Return one page of the feed of ``user_id``.

        Posts authored by the user or by anyone the user follows, joined with
        the author's username and the number of comments. Filters:

        * ``tags``: the post's tags must include every requested tag.
        * ``search``: case-insensitive substring of the title or the content.
        * ``since`` / ``until``: inclusive bounds on the creation time.

        Rows are ordered by creation time, then id, both in ``query.sort``
        direction, so pages are stable across requests.
        """
        direction = SORT_DIRECTIONS.get(query.sort)
        if direction is None:
            raise ValueError(f"Invalid sort direction: {query.sort!r}")

        followed = select(Follower.user_id).where(Follower.follower_id == user_id)
        comments_count = (
            select(func.count(Comment.id))
            .where(Comment.post_id == Post.id)
            .correlate(Post)
            .scalar_subquery()
        )

        stmt = (
            select(Post, User.username, comments_count)
            .join(User, User.id == Post.user_id)
            .where(or_(Post.user_id == user_id, Post.user_id.in_(followed)))
        )

        if query.tags:
            tagged = (
                select(PostTag.post_id)
                .where(PostTag.tag.in_(query.tags))
                .group_by(PostTag.post_id)
                .having(func.count(PostTag.tag) == len(query.tags))
            )
            stmt = stmt.where(Post.id.in_(tagged))

        if query.search:
            stmt = stmt.where(
                or_(
                    Post.title.icontains(query.search, autoescape=True),
                    Post.content.icontains(query.search, autoescape=True),
                )
            )

        if query.since is not None:
            stmt = stmt.where(Post.created_at >= query.since)
        if query.until is not None:
            stmt = stmt.where(Post.created_at <= query.until)

        stmt = (
            stmt.order_by(direction(Post.created_at), direction(Post.id))
            .limit(query.limit)
            .offset(query.offset)
        )

        async with self.transaction("get user feed") as session:
            result = await session.execute(stmt)
            rows = result.all()

        return [
            FeedEntry(post=post, author_username=username, comments_count=count)
            for post, username, count in rows
        ]
