from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from tenant_authz.app.errors import ForbiddenError, ValidationError
from tenant_authz.app.services.project_permissions import ProjectPermissionEngine
from tenant_authz.domain.base import utcnow
from tenant_authz.domain.entities import (
    ANY_LEVEL,
    FULL_ACCESS_ONLY,
    WRITABLE_LEVELS,
    PermissionLevel,
    ProjectPermission,
)


def make_permission(level=PermissionLevel.read_write, expires_at=None):
    granter = uuid4()
    return ProjectPermission(
        project_id=uuid4(),
        user_id=uuid4(),
        permission_level=level,
        granted_by=granter,
        expires_at=expires_at,
    )


@pytest.mark.asyncio
async def test_grant_upserts_parsed_level(mock_uow):
    project_id, user_id, granter_id = uuid4(), uuid4(), uuid4()
    mock_uow.project_permissions.upsert.return_value = make_permission()
    engine = ProjectPermissionEngine(mock_uow)

    await engine.grant(project_id, user_id, "read_write", granter_id)

    mock_uow.project_permissions.upsert.assert_awaited_once_with(
        project_id, user_id, PermissionLevel.read_write, granter_id, None
    )


@pytest.mark.asyncio
async def test_grant_stores_expiry_as_naive_utc(mock_uow):
    engine = ProjectPermissionEngine(mock_uow)
    expires_at = datetime(2030, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

    await engine.grant(uuid4(), uuid4(), PermissionLevel.read, uuid4(), expires_at)

    stored_expiry = mock_uow.project_permissions.upsert.await_args.args[4]
    assert stored_expiry == datetime(2030, 1, 1, 10, 0)
    assert stored_expiry.tzinfo is None


@pytest.mark.asyncio
async def test_grant_rejects_unknown_level(mock_uow):
    engine = ProjectPermissionEngine(mock_uow)

    with pytest.raises(ValidationError) as exc_info:
        await engine.grant(uuid4(), uuid4(), "owner", uuid4())

    assert exc_info.value.error.code == "INVALID_PERMISSION_LEVEL"
    mock_uow.project_permissions.upsert.assert_not_awaited()


@pytest.mark.asyncio
async def test_creator_gets_full_access(mock_uow):
    engine = ProjectPermissionEngine(mock_uow)
    project_id, creator_id = uuid4(), uuid4()

    await engine.grant_creator_access(project_id, creator_id)

    mock_uow.project_permissions.upsert.assert_awaited_once_with(
        project_id, creator_id, PermissionLevel.full_access, creator_id, None
    )


@pytest.mark.asyncio
async def test_check_without_grant_is_false(mock_uow):
    mock_uow.project_permissions.get.return_value = None
    engine = ProjectPermissionEngine(mock_uow)

    assert await engine.check(uuid4(), uuid4(), ANY_LEVEL) is False


@pytest.mark.asyncio
async def test_expired_grant_is_treated_as_absent(mock_uow):
    mock_uow.project_permissions.get.return_value = make_permission(
        PermissionLevel.full_access, expires_at=utcnow() - timedelta(minutes=1)
    )
    engine = ProjectPermissionEngine(mock_uow)

    assert await engine.check(uuid4(), uuid4(), FULL_ACCESS_ONLY) is False
    assert await engine.get_level(uuid4(), uuid4()) is None


@pytest.mark.asyncio
async def test_future_or_missing_expiry_matches_level(mock_uow):
    engine = ProjectPermissionEngine(mock_uow)

    mock_uow.project_permissions.get.return_value = make_permission(
        PermissionLevel.read_write, expires_at=utcnow() + timedelta(days=1)
    )
    assert await engine.check(uuid4(), uuid4(), WRITABLE_LEVELS) is True

    mock_uow.project_permissions.get.return_value = make_permission(PermissionLevel.read_write)
    assert await engine.check(uuid4(), uuid4(), WRITABLE_LEVELS) is True
    assert await engine.check(uuid4(), uuid4(), FULL_ACCESS_ONLY) is False


@pytest.mark.asyncio
async def test_expiry_evaluated_against_given_time(mock_uow):
    expires_at = datetime(2030, 6, 1)
    mock_uow.project_permissions.get.return_value = make_permission(
        PermissionLevel.read, expires_at=expires_at
    )
    engine = ProjectPermissionEngine(mock_uow)

    assert await engine.check(uuid4(), uuid4(), ANY_LEVEL, now=expires_at - timedelta(seconds=1))
    assert not await engine.check(uuid4(), uuid4(), ANY_LEVEL, now=expires_at)


@pytest.mark.asyncio
async def test_require_full_access_raises_forbidden(mock_uow):
    mock_uow.project_permissions.get.return_value = make_permission(PermissionLevel.read_write)
    engine = ProjectPermissionEngine(mock_uow)

    with pytest.raises(ForbiddenError):
        await engine.require_full_access(uuid4(), uuid4())


@pytest.mark.asyncio
async def test_revoke_is_idempotent(mock_uow):
    engine = ProjectPermissionEngine(mock_uow)
    project_id, user_id = uuid4(), uuid4()

    await engine.revoke(project_id, user_id)
    await engine.revoke(project_id, user_id)

    assert mock_uow.project_permissions.delete.await_count == 2
