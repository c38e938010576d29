"""
Request Transaction

One dedicated connection and one transaction per inbound request, with
exactly one of commit/rollback followed by exactly one release.
"""

import logging
from typing import Callable, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_authz.app.errors import TransactionError

logger = logging.getLogger(__name__)


class RequestTransaction:
    """
    Async context manager owning a request's session.

    Entering acquires a pooled connection and begins the transaction.
    Leaving commits when the body completed and rolls back when it raised,
    including cancellation. The `done` flag makes every later finalization
    attempt a no-op, so error and completion paths can both call in safely.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self._session_factory = session_factory
        self.session: Optional[AsyncSession] = None
        self.done = False

    async def begin(self) -> AsyncSession:
        session = self._session_factory()
        try:
            await session.begin()
            # Checks a connection out of the pool and starts the transaction
            await session.connection()
        except Exception as exc:
            logger.error(f"Failed to begin request transaction: {exc}")
            await session.close()
            raise TransactionError("Could not start database transaction") from exc

        self.session = session
        return session

    async def commit(self) -> None:
        if self.done or self.session is None:
            return
        self.done = True
        try:
            await self.session.commit()
        except Exception as exc:
            logger.error(f"Commit failed: {exc}")
            raise TransactionError("Could not commit database transaction") from exc
        finally:
            await self._release()

    async def rollback(self) -> None:
        if self.done or self.session is None:
            return
        self.done = True
        try:
            await self.session.rollback()
        except Exception as exc:
            logger.error(f"Rollback failed: {exc}")
            raise TransactionError("Could not roll back database transaction") from exc
        finally:
            await self._release()

    async def _release(self) -> None:
        session, self.session = self.session, None
        try:
            await session.close()
        except Exception as exc:
            logger.error(f"Connection release failed: {exc}")
            raise TransactionError("Could not release database connection") from exc

    async def __aenter__(self) -> "RequestTransaction":
        await self.begin()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()
        return False
