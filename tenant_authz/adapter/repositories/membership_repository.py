from typing import List, Optional
from uuid import UUID

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_authz.app.repositories.membership_repository import IMembershipRepository
from tenant_authz.domain.entities import Membership

from .dialects import CONFLICT_INSERTS


class MembershipRepository(IMembershipRepository):
    """Membership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, membership: Membership) -> Optional[Membership]:
        """Create a new membership; None when the (user, account) pair already exists"""
        connection = await self.session.connection()
        insert = CONFLICT_INSERTS.get(connection.dialect.name)
        if insert is None:
            if await self.get_by_user_and_account(membership.user_id, membership.account_id):
                return None
            self.session.add(membership)
            await self.session.flush()
            await self.session.refresh(membership)
            return membership

        stmt = insert(Membership).values(**membership.model_dump()).on_conflict_do_nothing(
            index_elements=["user_id", "account_id"]
        )
        await self.session.execute(stmt)

        stored = await self.get_by_user_and_account(membership.user_id, membership.account_id)
        if stored is None or stored.id != membership.id:
            return None
        return stored

    async def get_by_id(self, membership_id: UUID) -> Optional[Membership]:
        """Get membership by ID"""
        stmt = select(Membership).where(Membership.id == membership_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_user_and_account(
        self, user_id: UUID, account_id: UUID
    ) -> Optional[Membership]:
        """Get membership by user and account"""
        stmt = select(Membership).where(
            Membership.user_id == user_id, Membership.account_id == account_id
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_user_id(self, user_id: UUID) -> List[Membership]:
        """Get all memberships for a user"""
        stmt = (
            select(Membership)
            .where(Membership.user_id == user_id)
            .order_by(col(Membership.created_at).desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_account_id(self, account_id: UUID) -> List[Membership]:
        """Get all memberships for an account"""
        stmt = select(Membership).where(Membership.account_id == account_id)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def update(self, membership: Membership) -> Membership:
        """Update existing membership"""
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def delete(self, membership: Membership) -> None:
        """Delete a membership"""
        await self.session.delete(membership)
        await self.session.flush()
