from typing import Any, Dict, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_authz.app.repositories.user_context_repository import IUserContextRepository
from tenant_authz.domain.base import utcnow
from tenant_authz.domain.entities import UserContext


class UserContextRepository(IUserContextRepository):
    """UserContext repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: UUID) -> Optional[UserContext]:
        stmt = select(UserContext).where(UserContext.user_id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def upsert(
        self,
        user_id: UUID,
        account_id: UUID,
        extra_data: Optional[Dict[str, Any]] = None,
    ) -> UserContext:
        context = await self.get_by_user_id(user_id)

        if context is None:
            context = UserContext(
                user_id=user_id,
                current_account_id=account_id,
                context_data=dict(extra_data or {}),
            )
        else:
            context.current_account_id = account_id
            context.last_switched_at = utcnow()
            # Reassign so the JSON column is seen as dirty
            context.context_data = {**(context.context_data or {}), **(extra_data or {})}

        self.session.add(context)
        await self.session.flush()
        await self.session.refresh(context)
        return context

    async def delete(self, user_id: UUID) -> None:
        context = await self.get_by_user_id(user_id)
        if context is not None:
            await self.session.delete(context)
            await self.session.flush()
