from uuid import uuid4

import pytest

from tenant_authz.app.errors import ForbiddenError, ValidationError
from tenant_authz.app.services.tenant_context import TenantContextBinder
from tenant_authz.domain.entities import Membership, MembershipRole, User


@pytest.fixture
def member(mock_uow):
    user = User(external_id="user_123", email="member@acme.test")
    account_id = uuid4()
    mock_uow.users.get_by_external_id.return_value = user
    mock_uow.memberships.get_by_user_and_account.return_value = Membership(
        user_id=user.id, account_id=account_id, role=MembershipRole.admin
    )
    return user, account_id


@pytest.mark.asyncio
async def test_no_tenant_id_binds_nothing(mock_uow):
    binder = TenantContextBinder(mock_uow)

    assert await binder.bind("user_123", None) is None
    assert await binder.bind("user_123", "") is None
    mock_uow.users.get_by_external_id.assert_not_awaited()
    mock_uow.bind_tenant.assert_not_awaited()


@pytest.mark.asyncio
async def test_malformed_tenant_id(mock_uow):
    binder = TenantContextBinder(mock_uow)

    with pytest.raises(ValidationError) as exc_info:
        await binder.bind("user_123", "not-a-uuid")

    assert exc_info.value.error.code == "INVALID_TENANT_ID"


@pytest.mark.asyncio
async def test_anonymous_caller_is_denied(mock_uow):
    binder = TenantContextBinder(mock_uow)

    with pytest.raises(ForbiddenError):
        await binder.bind(None, str(uuid4()))


@pytest.mark.asyncio
async def test_unknown_user_is_denied(mock_uow):
    mock_uow.users.get_by_external_id.return_value = None
    binder = TenantContextBinder(mock_uow)

    with pytest.raises(ForbiddenError) as exc_info:
        await binder.bind("user_404", str(uuid4()))

    assert exc_info.value.error.code == "TENANT_ACCESS_DENIED"
    mock_uow.bind_tenant.assert_not_awaited()


@pytest.mark.asyncio
async def test_non_member_is_denied(mock_uow, member):
    mock_uow.memberships.get_by_user_and_account.return_value = None
    binder = TenantContextBinder(mock_uow)

    with pytest.raises(ForbiddenError):
        await binder.bind("user_123", str(uuid4()))

    mock_uow.bind_tenant.assert_not_awaited()


@pytest.mark.asyncio
async def test_member_is_bound(mock_uow, member):
    user, account_id = member
    binder = TenantContextBinder(mock_uow)

    context = await binder.bind("user_123", str(account_id))

    assert context.account_id == account_id
    assert context.user_id == user.id
    assert context.role == MembershipRole.admin
    mock_uow.bind_tenant.assert_awaited_once_with(account_id)


@pytest.mark.asyncio
async def test_store_failure_degrades_to_unscoped(mock_uow, caplog):
    mock_uow.users.get_by_external_id.side_effect = ConnectionError("database unavailable")
    binder = TenantContextBinder(mock_uow)

    assert await binder.bind("user_123", str(uuid4())) is None
    mock_uow.bind_tenant.assert_not_awaited()
    assert "Failed to verify membership" in caplog.text


@pytest.mark.asyncio
async def test_bind_failure_degrades_to_unscoped(mock_uow, member):
    _, account_id = member
    mock_uow.bind_tenant.side_effect = RuntimeError("set_config failed")
    binder = TenantContextBinder(mock_uow)

    assert await binder.bind("user_123", str(account_id)) is None
