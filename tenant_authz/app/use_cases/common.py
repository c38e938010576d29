from uuid import UUID

from tenant_authz.app.errors import ForbiddenError, UnauthorizedError
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.domain.entities import User


async def require_user(uow: UnitOfWork, external_id: str) -> User:
    """The caller's User row; an identity with no row cannot act"""
    user = await uow.users.get_by_external_id(external_id)
    if user is None:
        raise UnauthorizedError("User not found", code="USER_NOT_FOUND")
    return user


def require_tenant(uow: UnitOfWork) -> UUID:
    """Account id bound to the current transaction"""
    if uow.tenant_id is None:
        raise ForbiddenError(
            "A tenant context is required for this operation",
            code="TENANT_CONTEXT_UNAVAILABLE",
        )
    return uow.tenant_id
