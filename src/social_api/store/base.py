"""Shared repository plumbing: transactions, time budgets and error translation."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from social_api.config import StorageConfig
from social_api.store.errors import InternalError, StoreError

logger = logging.getLogger(__name__)

SQLITE_UNIQUE_PREFIX = "UNIQUE constraint failed: "


def constraint_violated(exc: IntegrityError, name: str, *columns: str) -> bool:
    """Tell whether ``exc`` is a unique violation of one specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the offending
    ``table.column`` list instead, so both are accepted.

    Args:
        exc: The integrity error raised by the flush or statement.
        name: Constraint name as declared on the model.
        columns: Qualified columns of the constraint, in declaration order.
    """
    message = str(exc.orig)
    if f'"{name}"' in message:
        return True
    if SQLITE_UNIQUE_PREFIX in message:
        failed = message.split(SQLITE_UNIQUE_PREFIX, 1)[1].splitlines()[0].strip()
        return failed == ", ".join(columns)
    return False


class Repository:
    """Base class for repositories.

    Holds the session factory (the connection provider) and the explicit
    storage configuration. Every public operation opens its own transaction
    through :meth:`transaction`.
    """

    def __init__(self, sessions: async_sessionmaker[AsyncSession], config: StorageConfig) -> None:
        self._sessions = sessions
        self.config = config

    @asynccontextmanager
    async def transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """Run one atomic unit under the configured time budget.

        The session commits when the block exits normally and rolls back on
        any exception. Storage errors raised inside the block propagate as-is;
        timeouts and unclassified database failures become ``InternalError``
        after the rollback.

        Args:
            operation: Short description used in log messages.
        """
        try:
            async with asyncio.timeout(self.config.query_timeout):
                async with self._sessions.begin() as session:
                    yield session
        except StoreError:
            raise
        except TimeoutError as e:
            logger.error("%s timed out after %ss", operation, self.config.query_timeout)
            raise InternalError() from e
        except SQLAlchemyError as e:
            logger.error("%s failed: %s", operation, type(e).__name__, exc_info=True)
            raise InternalError() from e
