from uuid import uuid4

import pytest

from tenant_authz.app.use_cases.accounts import SwitchAccountUseCase
from tenant_authz.domain.entities import Account, Membership, MembershipRole, User, UserContext


@pytest.fixture
def user(mock_uow):
    user = User(external_id="user_1")
    mock_uow.users.get_by_external_id.return_value = user
    return user


@pytest.mark.asyncio
async def test_switch_to_account_without_membership(mock_uow, user):
    current_account = uuid4()
    target = Account(name="Other Co")
    mock_uow.accounts.get_by_id.return_value = target
    mock_uow.user_contexts.get_by_user_id.return_value = UserContext(
        user_id=user.id, current_account_id=current_account
    )
    mock_uow.memberships.get_by_user_and_account.return_value = None

    result = await SwitchAccountUseCase(mock_uow).execute("user_1", target.id)

    assert result.is_err()
    assert result.error.code == "NOT_A_MEMBER"
    mock_uow.user_contexts.upsert.assert_not_awaited()


@pytest.mark.asyncio
async def test_switch_reports_previous_account(mock_uow, user):
    previous_account = uuid4()
    target = Account(name="Beta Inc")
    mock_uow.accounts.get_by_id.return_value = target
    mock_uow.user_contexts.get_by_user_id.return_value = UserContext(
        user_id=user.id, current_account_id=previous_account
    )
    mock_uow.memberships.get_by_user_and_account.return_value = Membership(
        user_id=user.id, account_id=target.id, role=MembershipRole.viewer
    )
    mock_uow.user_contexts.upsert.return_value = UserContext(
        user_id=user.id, current_account_id=target.id, context_data={"tab": "projects"}
    )

    result = await SwitchAccountUseCase(mock_uow).execute(
        "user_1", target.id, {"tab": "projects"}
    )

    assert result.is_ok()
    assert result.value.account_id == str(target.id)
    assert result.value.role == "viewer"
    assert result.value.previous_account_id == str(previous_account)
    assert result.value.context_data == {"tab": "projects"}


@pytest.mark.asyncio
async def test_switch_to_unknown_account(mock_uow, user):
    mock_uow.accounts.get_by_id.return_value = None

    result = await SwitchAccountUseCase(mock_uow).execute("user_1", uuid4())

    assert result.is_err()
    assert result.error.code == "ACCOUNT_NOT_FOUND"
