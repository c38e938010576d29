"""
Role Authority

Resolves and changes a user's global role. Where the role lives depends on
the deployment: the users table in local deployments, the identity
provider's private metadata in managed ones. Both are RoleStore
implementations; the authority is handed its authoritative store (and an
optional mirror) once, at construction.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field

from tenant_authz.app.errors import (
    AppError,
    ForbiddenError,
    InsufficientRoleError,
    InternalError,
    ValidationError,
)
from tenant_authz.domain.base import utcnow
from tenant_authz.domain.entities import GlobalRole
from tenant_authz.domain.environment import EnvironmentSettings

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("tenant_authz.audit")

# "*" grants everything; "<verb>:*" grants every permission with that verb
GLOBAL_PERMISSIONS: Dict[GlobalRole, Tuple[str, ...]] = {
    GlobalRole.user: (),
    GlobalRole.support: ("view:*",),
    GlobalRole.admin: ("view:*", "edit:*", "manage:billing"),
    GlobalRole.super_admin: ("*",),
}

ADMIN_ASSIGNABLE_ROLES = (GlobalRole.user, GlobalRole.support, GlobalRole.admin)


def permission_granted(granted: Sequence[str], permission: str) -> bool:
    for entry in granted:
        if entry == "*" or entry == permission:
            return True
        if entry.endswith(":*") and permission.startswith(entry[:-1]):
            return True
    return False


def has_minimum_role(role: GlobalRole, min_role: GlobalRole) -> bool:
    return role.rank >= min_role.rank


def can_change_role(changer_role: GlobalRole, target_role: GlobalRole) -> bool:
    """
    Only super admins assign super_admin; admins assign user, support or
    admin; nobody else assigns anything.
    """
    if changer_role == GlobalRole.super_admin:
        return True
    if changer_role == GlobalRole.admin:
        return target_role in ADMIN_ASSIGNABLE_ROLES
    return False


def parse_role(value: Union[str, GlobalRole]) -> GlobalRole:
    try:
        return GlobalRole(value)
    except ValueError:
        raise ValidationError(
            f"Invalid role: {value}. Must be one of: user, support, admin, super_admin",
            code="INVALID_ROLE",
        )


class RoleStore(ABC):
    """A backing store for global roles"""

    name: str

    @abstractmethod
    async def get_role(self, external_id: str) -> Optional[GlobalRole]:
        """Stored role, or None when the identity has none recorded"""
        pass

    @abstractmethod
    async def set_role(self, external_id: str, role: GlobalRole, changed_by: str) -> None:
        """Persist the role (raises NotFoundError for an unknown identity)"""
        pass


class RoleAuditEvent(BaseModel):
    actor: str
    target: str
    old_role: GlobalRole
    new_role: GlobalRole
    reason: str
    environment: str
    timestamp: datetime = Field(default_factory=utcnow)


class RoleAuditLogger:
    """Writes role changes to the audit log; never raises"""

    def emit(self, event: RoleAuditEvent) -> None:
        try:
            audit_logger.info(event.model_dump_json())
        except Exception as exc:
            logger.error(f"Failed to write role audit event for {event.target}: {exc}")


class RoleAuthority:
    def __init__(
        self,
        settings: EnvironmentSettings,
        primary: RoleStore,
        mirror: Optional[RoleStore] = None,
        audit: Optional[RoleAuditLogger] = None,
    ):
        self.settings = settings
        self.primary = primary
        self.mirror = mirror
        self.audit = audit or RoleAuditLogger()

    async def get_role(self, external_id: str) -> GlobalRole:
        """
        Current global role of an identity.

        Never raises: any lookup failure degrades to GlobalRole.user.
        """
        try:
            role = await self.primary.get_role(external_id)
        except Exception as exc:
            logger.error(f"Failed to get role from {self.primary.name} for {external_id}: {exc}")
            return GlobalRole.user

        return role or GlobalRole.user

    async def has_permission(self, external_id: str, permission: str) -> bool:
        role = await self.get_role(external_id)
        return permission_granted(GLOBAL_PERMISSIONS[role], permission)

    async def require_permission(self, external_id: str, permission: str) -> GlobalRole:
        role = await self.get_role(external_id)
        if not permission_granted(GLOBAL_PERMISSIONS[role], permission):
            raise ForbiddenError(
                f"Permission required: {permission}", code="PERMISSION_REQUIRED"
            )
        return role

    async def require_role(self, external_id: str, min_role: GlobalRole) -> GlobalRole:
        role = await self.get_role(external_id)
        if not has_minimum_role(role, min_role):
            raise InsufficientRoleError(
                f"Required role: {min_role.value}, user has: {role.value}"
            )
        return role

    async def change_role(
        self,
        target: str,
        new_role: Union[str, GlobalRole],
        changed_by: str,
        reason: str,
    ) -> RoleAuditEvent:
        """
        Assign new_role to target on behalf of changed_by.

        The authoritative store must accept the write; the mirror and the
        audit log are best effort and only ever log their failures.
        """
        new_role = parse_role(new_role)

        changer_role = await self.get_role(changed_by)
        if not can_change_role(changer_role, new_role):
            raise InsufficientRoleError(
                f"Insufficient permissions to assign role: {new_role.value}"
            )

        old_role = await self.get_role(target)

        try:
            await self.primary.set_role(target, new_role, changed_by)
        except AppError:
            raise
        except Exception as exc:
            logger.error(f"Failed to write role to {self.primary.name} for {target}: {exc}")
            raise InternalError("Failed to update role") from exc

        await self._mirror_role(target, new_role, changed_by)

        event = RoleAuditEvent(
            actor=changed_by,
            target=target,
            old_role=old_role,
            new_role=new_role,
            reason=reason,
            environment=self.settings.environment.value,
        )
        self.audit.emit(event)

        if self.settings.rich_logging:
            logger.info(
                f"Role changed: {target} {old_role.value} -> {new_role.value} by {changed_by}"
            )

        return event

    async def _mirror_role(self, target: str, role: GlobalRole, changed_by: str) -> None:
        if self.mirror is None:
            return
        try:
            await self.mirror.set_role(target, role, changed_by)
        except Exception as exc:
            logger.warning(f"Failed to mirror role to {self.mirror.name} for {target}: {exc}")
