"""Comment repository."""

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from social_api.models.comment import Comment
from social_api.store.base import Repository


class CommentRepository(Repository):
    """Append-only comments on posts."""

    async def create(self, *, post_id: int, user_id: int, content: str) -> Comment:
        """Add a comment; the returned comment has its author loaded."""
        comment = Comment(post_id=post_id, user_id=user_id, content=content)
        async with self.transaction("create comment") as session:
            session.add(comment)
            await session.flush()
            result = await session.execute(
                select(Comment)
                .where(Comment.id == comment.id)
                .options(selectinload(Comment.author))
                .execution_options(populate_existing=True)
            )
            return result.scalar_one()

    async def get_by_post_id(self, post_id: int) -> list[Comment]:
        """List a post's comments, newest first."""
        async with self.transaction("list comments") as session:
            query = (
                select(Comment)
                .where(Comment.post_id == post_id)
                .options(selectinload(Comment.author))
                .order_by(Comment.created_at.desc(), Comment.id.desc())
            )
            result = await session.execute(query)
            return list(result.scalars().all())
