from typing import Dict, Optional
from uuid import UUID

from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_authz.app.repositories.user_repository import IUserRepository
from tenant_authz.domain.entities import GlobalRole, User

from .dialects import CONFLICT_INSERTS


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_external_id(self, external_id: str) -> Optional[User]:
        """Get user by identity provider subject"""
        stmt = select(User).where(User.external_id == external_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.first()

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def create_if_absent(self, user: User) -> User:
        """Insert the user unless the external id exists; return the stored row"""
        connection = await self.session.connection()
        insert = CONFLICT_INSERTS.get(connection.dialect.name)
        if insert is None:
            existing = await self.get_by_external_id(user.external_id)
            return existing if existing is not None else await self.create(user)

        stmt = insert(User).values(**user.model_dump()).on_conflict_do_nothing(
            index_elements=["external_id"]
        )
        await self.session.execute(stmt)
        return await self.get_by_external_id(user.external_id)

    async def update(self, user: User) -> User:
        """Update existing user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update_role(self, external_id: str, role: GlobalRole) -> Optional[User]:
        user = await self.get_by_external_id(external_id)
        if user is None:
            return None
        user.global_role = role
        return await self.update(user)

    async def count_by_role(self) -> Dict[GlobalRole, int]:
        stmt = select(User.global_role, func.count()).group_by(User.global_role)
        result = await self.session.exec(stmt)
        counts = {role: 0 for role in GlobalRole}
        for role, total in result.all():
            counts[GlobalRole(role)] = total
        return counts
