"""Populate a development database with sample users, follows, posts and comments.

Usage:
    python -m social_api.seed [--users N] [--posts N] [--comments N]
    social-seed [--users N] [--posts N] [--comments N]
"""

import argparse
import asyncio
import logging
import random

from social_api.config import get_settings
from social_api.database import create_engine, create_schema, create_session_factory
from social_api.store import ConflictError, Storage

logger = logging.getLogger(__name__)

TITLES = [
    "Hello world",
    "Notes on concurrency",
    "Weekend project",
    "Reading list",
    "A small refactor",
    "Benchmarks",
]

CONTENTS = [
    "Trying out a new idea today.",
    "Optimistic locking saved me from a lost update.",
    "Pagination should always have a deterministic order.",
    "Shipping small changes beats shipping big ones.",
]

TAGS = ["python", "sql", "async", "testing", "design", "tips"]

COMMENTS = [
    "Nice post!",
    "Thanks for sharing.",
    "I had the same problem last week.",
    "Could you expand on this?",
]


async def seed(
    storage: Storage,
    users: int = 10,
    posts: int = 40,
    comments: int = 80,
    rng: random.Random | None = None,
) -> dict[str, int]:
    """Create sample data through the storage layer.

    Returns:
        Counts of created users, follow edges, posts and comments.
    """
    rng = rng or random.Random()
    counts = {"users": 0, "follows": 0, "posts": 0, "comments": 0}

    user_ids = []
    for i in range(users):
        user = await storage.users.create(
            username=f"user{i}",
            email=f"user{i}@example.com",
            password="password123",
        )
        user_ids.append(user.id)
        counts["users"] += 1

    for follower_id in user_ids:
        for user_id in rng.sample(user_ids, k=min(3, len(user_ids))):
            if user_id == follower_id:
                continue
            try:
                await storage.followers.follow(follower_id, user_id)
            except ConflictError:
                continue
            counts["follows"] += 1

    post_ids = []
    for _ in range(posts if user_ids else 0):
        post = await storage.posts.create(
            user_id=rng.choice(user_ids),
            title=rng.choice(TITLES),
            content=rng.choice(CONTENTS),
            tags=rng.sample(TAGS, k=2),
        )
        post_ids.append(post.id)
        counts["posts"] += 1

    for _ in range(comments if post_ids else 0):
        await storage.comments.create(
            post_id=rng.choice(post_ids),
            user_id=rng.choice(user_ids),
            content=rng.choice(COMMENTS),
        )
        counts["comments"] += 1

    return counts


async def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the database with sample data")
    parser.add_argument("--users", type=int, default=10)
    parser.add_argument("--posts", type=int, default=40)
    parser.add_argument("--comments", type=int, default=80)
    args = parser.parse_args(argv)

    settings = get_settings()
    engine = create_engine(settings)
    try:
        if settings.auto_create_schema:
            await create_schema(engine)
        storage = Storage(create_session_factory(engine), settings.storage_config())
        counts = await seed(storage, users=args.users, posts=args.posts, comments=args.comments)
    finally:
        await engine.dispose()

    logger.info("Seeding complete: %s", counts)


def run() -> None:
    """Console entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(main())


if __name__ == "__main__":
    run()
