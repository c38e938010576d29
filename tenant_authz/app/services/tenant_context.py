"""
Tenant Context Binder

Scopes a request's transaction to one account. After a successful bind,
every query in the same transaction sees only that account's rows.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from tenant_authz.app.errors import AppError, ForbiddenError, ValidationError
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.domain.entities import MembershipRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantContext:
    account_id: UUID
    user_id: UUID
    role: MembershipRole


def parse_tenant_id(value: str) -> UUID:
    try:
        return UUID(value)
    except (ValueError, TypeError, AttributeError):
        raise ValidationError("Invalid tenant ID format", code="INVALID_TENANT_ID")


class TenantContextBinder:
    """
    Binds the tenant named by the caller after checking membership.

    No tenant id: nothing is bound. Unknown caller or missing membership:
    ForbiddenError. Store failures while checking or binding: logged, and
    the request continues with no tenant bound.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def bind(
        self, external_id: Optional[str], raw_account_id: Optional[str]
    ) -> Optional[TenantContext]:
        if not raw_account_id:
            return None

        account_id = parse_tenant_id(raw_account_id)

        if not external_id:
            raise ForbiddenError("Access to this account is denied", code="TENANT_ACCESS_DENIED")

        try:
            user = await self.uow.users.get_by_external_id(external_id)
            membership = None
            if user is not None:
                membership = await self.uow.memberships.get_by_user_and_account(
                    user.id, account_id
                )
        except AppError:
            raise
        except Exception as exc:
            logger.warning(f"Failed to verify membership for account {account_id}: {exc}")
            return None

        if user is None or membership is None:
            raise ForbiddenError("Access to this account is denied", code="TENANT_ACCESS_DENIED")

        try:
            await self.uow.bind_tenant(account_id)
        except Exception as exc:
            logger.warning(f"Failed to set tenant context for account {account_id}: {exc}")
            return None

        return TenantContext(account_id=account_id, user_id=user.id, role=membership.role)
