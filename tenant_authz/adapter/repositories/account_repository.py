from typing import List, Optional
from uuid import UUID

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_authz.app.repositories.account_repository import IAccountRepository
from tenant_authz.domain.entities import Account


class AccountRepository(IAccountRepository):
    """Account repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, account_id: UUID) -> Optional[Account]:
        """Get account by ID"""
        stmt = select(Account).where(Account.id == account_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_ids(self, account_ids: List[UUID]) -> List[Account]:
        if not account_ids:
            return []
        stmt = select(Account).where(col(Account.id).in_(account_ids))
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, account: Account) -> Account:
        """Create a new account"""
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account
