import itertools
import logging
from typing import Dict, Optional
from unittest.mock import patch

import pytest

from tenant_authz.app.errors import ForbiddenError, InsufficientRoleError, InternalError, ValidationError
from tenant_authz.app.services.role_authority import (
    RoleAuthority,
    RoleStore,
    can_change_role,
    has_minimum_role,
    permission_granted,
)
from tenant_authz.domain.entities import GlobalRole
from tenant_authz.domain.entities.enums import ROLE_HIERARCHY
from tenant_authz.domain.environment import DeploymentEnvironment, EnvironmentSettings


class InMemoryRoleStore(RoleStore):
    def __init__(self, name: str = "memory", roles: Optional[Dict[str, GlobalRole]] = None):
        self.name = name
        self.roles = dict(roles or {})
        self.writes = []

    async def get_role(self, external_id: str) -> Optional[GlobalRole]:
        return self.roles.get(external_id)

    async def set_role(self, external_id: str, role: GlobalRole, changed_by: str) -> None:
        self.writes.append((external_id, role, changed_by))
        self.roles[external_id] = role


class BrokenRoleStore(RoleStore):
    name = "broken"

    async def get_role(self, external_id: str) -> Optional[GlobalRole]:
        raise ConnectionError("store unreachable")

    async def set_role(self, external_id: str, role: GlobalRole, changed_by: str) -> None:
        raise ConnectionError("store unreachable")


@pytest.fixture
def settings():
    return EnvironmentSettings(
        environment=DeploymentEnvironment.local,
        identity_provider_enabled=False,
        rich_logging=True,
    )


def authority_with(settings, **roles) -> RoleAuthority:
    store = InMemoryRoleStore(roles={k: GlobalRole(v) for k, v in roles.items()})
    return RoleAuthority(settings, primary=store)


@pytest.mark.parametrize(
    "lower,higher", list(itertools.combinations(ROLE_HIERARCHY, 2))
)
@pytest.mark.asyncio
async def test_require_role_is_monotonic(settings, lower, higher):
    authority = authority_with(settings, low=lower.value, high=higher.value)

    with pytest.raises(InsufficientRoleError):
        await authority.require_role("low", higher)

    assert await authority.require_role("high", lower) == higher
    assert await authority.require_role("high", higher) == higher


@pytest.mark.asyncio
async def test_get_role_defaults_to_user_when_missing(settings):
    authority = authority_with(settings)

    assert await authority.get_role("unknown") == GlobalRole.user


@pytest.mark.asyncio
async def test_get_role_degrades_to_user_when_store_fails(settings):
    authority = RoleAuthority(settings, primary=BrokenRoleStore())

    assert await authority.get_role("anyone") == GlobalRole.user


def test_permission_wildcards():
    assert permission_granted(("*",), "manage:everything")
    assert permission_granted(("view:*",), "view:all_users")
    assert not permission_granted(("view:*",), "edit:users")
    assert permission_granted(("manage:billing",), "manage:billing")
    assert not permission_granted(("manage:billing",), "manage:users")
    assert not permission_granted((), "view:all_users")


@pytest.mark.asyncio
async def test_has_permission_by_role(settings):
    authority = authority_with(
        settings, u="user", s="support", a="admin", root="super_admin"
    )

    assert not await authority.has_permission("u", "view:all_users")
    assert await authority.has_permission("s", "view:all_users")
    assert not await authority.has_permission("s", "edit:users")
    assert await authority.has_permission("a", "edit:users")
    assert await authority.has_permission("a", "manage:billing")
    assert not await authority.has_permission("a", "manage:system")
    assert await authority.has_permission("root", "manage:system")


@pytest.mark.asyncio
async def test_require_permission_raises_forbidden(settings):
    authority = authority_with(settings, u="user")

    with pytest.raises(ForbiddenError) as exc_info:
        await authority.require_permission("u", "view:all_users")

    assert exc_info.value.error.code == "PERMISSION_REQUIRED"


def test_role_change_matrix():
    for target in GlobalRole:
        assert can_change_role(GlobalRole.super_admin, target)

    assert not can_change_role(GlobalRole.admin, GlobalRole.super_admin)
    for target in (GlobalRole.admin, GlobalRole.support, GlobalRole.user):
        assert can_change_role(GlobalRole.admin, target)

    for changer in (GlobalRole.support, GlobalRole.user):
        for target in GlobalRole:
            assert not can_change_role(changer, target)


def test_has_minimum_role():
    assert has_minimum_role(GlobalRole.admin, GlobalRole.support)
    assert not has_minimum_role(GlobalRole.support, GlobalRole.admin)


@pytest.mark.asyncio
async def test_admin_cannot_assign_super_admin(settings):
    authority = authority_with(settings, boss="admin", target="user")

    with pytest.raises(InsufficientRoleError):
        await authority.change_role("target", "super_admin", "boss", "promotion")

    assert authority.primary.roles["target"] == GlobalRole.user


@pytest.mark.parametrize("new_role", ["user", "support", "admin", "super_admin"])
@pytest.mark.asyncio
async def test_super_admin_assigns_any_role(settings, new_role):
    authority = authority_with(settings, root="super_admin", target="support")

    event = await authority.change_role("target", new_role, "root", "reorg")

    assert event.old_role == GlobalRole.support
    assert event.new_role == GlobalRole(new_role)
    assert authority.primary.roles["target"] == GlobalRole(new_role)


@pytest.mark.asyncio
async def test_change_role_rejects_unknown_role(settings):
    authority = authority_with(settings, root="super_admin")

    with pytest.raises(ValidationError) as exc_info:
        await authority.change_role("target", "owner", "root", "typo")

    assert exc_info.value.error.code == "INVALID_ROLE"


@pytest.mark.asyncio
async def test_change_role_writes_mirror(settings):
    primary = InMemoryRoleStore("primary", {"root": GlobalRole.super_admin})
    mirror = InMemoryRoleStore("mirror")
    authority = RoleAuthority(settings, primary=primary, mirror=mirror)

    await authority.change_role("target", GlobalRole.admin, "root", "needs access")

    assert mirror.writes == [("target", GlobalRole.admin, "root")]


@pytest.mark.asyncio
async def test_mirror_failure_does_not_fail_change(settings):
    primary = InMemoryRoleStore("primary", {"root": GlobalRole.super_admin})
    authority = RoleAuthority(settings, primary=primary, mirror=BrokenRoleStore())

    event = await authority.change_role("target", GlobalRole.support, "root", "support rota")

    assert event.new_role == GlobalRole.support
    assert primary.roles["target"] == GlobalRole.support


@pytest.mark.asyncio
async def test_primary_failure_fails_change(settings):
    class ReadOnlyStore(InMemoryRoleStore):
        async def set_role(self, external_id, role, changed_by):
            raise ConnectionError("write refused")

    primary = ReadOnlyStore("primary", {"root": GlobalRole.super_admin})
    authority = RoleAuthority(settings, primary=primary)

    with pytest.raises(InternalError):
        await authority.change_role("target", GlobalRole.admin, "root", "needs access")


@pytest.mark.asyncio
async def test_change_role_emits_audit_event(settings, caplog):
    authority = authority_with(settings, root="super_admin", target="user")

    with caplog.at_level(logging.INFO, logger="tenant_authz.audit"):
        await authority.change_role("target", "admin", "root", "on-call lead")

    audit_records = [r for r in caplog.records if r.name == "tenant_authz.audit"]
    assert len(audit_records) == 1
    message = audit_records[0].getMessage()
    assert '"actor":"root"' in message
    assert '"old_role":"user"' in message
    assert '"new_role":"admin"' in message
    assert '"reason":"on-call lead"' in message


@pytest.mark.asyncio
async def test_audit_failure_does_not_fail_change(settings):
    authority = authority_with(settings, root="super_admin", target="user")

    with patch("tenant_authz.app.services.role_authority.audit_logger") as audit_logger:
        audit_logger.info.side_effect = OSError("log sink down")
        event = await authority.change_role("target", "support", "root", "rota")

    assert event.new_role == GlobalRole.support
    assert authority.primary.roles["target"] == GlobalRole.support
