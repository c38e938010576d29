import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from tenant_authz.adapter.services.identity_provider_client import HttpIdentityProvider
from tenant_authz.adapter.services.role_stores import (
    DatabaseRoleStore,
    IdentityProviderRoleStore,
    build_role_authority,
)
from tenant_authz.app.errors import NotFoundError
from tenant_authz.domain.entities import GlobalRole, User
from tenant_authz.domain.environment import DeploymentEnvironment, EnvironmentSettings


class FakeIdentityProviderApi:
    """In-memory backend API served through httpx.MockTransport"""

    def __init__(self, users):
        self.users = users
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        assert request.headers["authorization"] == "Bearer sk_test"

        parts = request.url.path.strip("/").split("/")
        external_id = parts[2] if len(parts) > 2 else None
        user = self.users.get(external_id)
        if user is None:
            return httpx.Response(404, json={"errors": [{"code": "resource_not_found"}]})

        if request.method == "GET":
            return httpx.Response(200, json=user)
        if request.method == "PATCH":
            body = json.loads(request.content)
            user["private_metadata"].update(body["private_metadata"])
            return httpx.Response(200, json=user)
        return httpx.Response(405)

    def client(self) -> HttpIdentityProvider:
        return HttpIdentityProvider(
            "https://idp.test/v1", "sk_test", transport=httpx.MockTransport(self.handler)
        )


@pytest.fixture
def idp_api():
    return FakeIdentityProviderApi(
        {
            "user_admin": {
                "id": "user_admin",
                "primary_email_address_id": "idn_2",
                "email_addresses": [
                    {"id": "idn_1", "email_address": "old@acme.test"},
                    {"id": "idn_2", "email_address": "admin@acme.test"},
                ],
                "private_metadata": {"globalRole": "admin"},
            },
            "user_plain": {
                "id": "user_plain",
                "email_addresses": [],
                "private_metadata": {},
            },
        }
    )


def settings(environment, idp_enabled=True):
    return EnvironmentSettings(
        environment=environment, identity_provider_enabled=idp_enabled, rich_logging=False
    )


@pytest.mark.asyncio
async def test_identity_provider_store_reads_metadata_role(idp_api):
    store = IdentityProviderRoleStore(idp_api.client())

    assert await store.get_role("user_admin") == GlobalRole.admin
    assert await store.get_role("user_plain") is None


@pytest.mark.asyncio
async def test_identity_provider_store_writes_metadata(idp_api):
    store = IdentityProviderRoleStore(idp_api.client())

    await store.set_role("user_plain", GlobalRole.support, "user_admin")

    metadata = idp_api.users["user_plain"]["private_metadata"]
    assert metadata["globalRole"] == "support"
    assert metadata["changedBy"] == "user_admin"
    assert "lastChanged" in metadata
    assert idp_api.requests[-1].url.path == "/v1/users/user_plain/metadata"


@pytest.mark.asyncio
async def test_identity_provider_unknown_user(idp_api):
    store = IdentityProviderRoleStore(idp_api.client())

    with pytest.raises(NotFoundError):
        await store.set_role("user_missing", GlobalRole.user, "user_admin")


@pytest.mark.asyncio
async def test_primary_email_prefers_primary_address(idp_api):
    client = idp_api.client()

    assert await client.get_primary_email("user_admin") == "admin@acme.test"
    assert await client.get_primary_email("user_plain") is None
    await client.aclose()


@pytest.mark.asyncio
async def test_database_store_missing_user(mock_uow):
    mock_uow.users.update_role.return_value = None
    store = DatabaseRoleStore(mock_uow)

    with pytest.raises(NotFoundError) as exc_info:
        await store.set_role("user_missing", GlobalRole.admin, "user_root")

    assert exc_info.value.error.code == "TARGET_USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_database_store_reads_user_role(mock_uow):
    mock_uow.users.get_by_external_id.return_value = User(
        external_id="user_1", global_role=GlobalRole.support
    )
    store = DatabaseRoleStore(mock_uow)

    assert await store.get_role("user_1") == GlobalRole.support


def test_local_authority_uses_database_and_mirrors_to_provider(mock_uow):
    authority = build_role_authority(
        settings(DeploymentEnvironment.local), mock_uow, MagicMock()
    )

    assert authority.primary.name == "database"
    assert authority.mirror.name == "identity_provider"


def test_managed_authority_uses_provider_and_mirrors_to_database(mock_uow):
    authority = build_role_authority(
        settings(DeploymentEnvironment.managed), mock_uow, MagicMock()
    )

    assert authority.primary.name == "identity_provider"
    assert authority.mirror.name == "database"


def test_managed_without_provider_falls_back_to_database(mock_uow):
    authority = build_role_authority(
        settings(DeploymentEnvironment.managed, idp_enabled=False), mock_uow, None
    )

    assert authority.primary.name == "database"
    assert authority.mirror is None


@pytest.mark.asyncio
async def test_managed_change_survives_database_mirror_failure(idp_api, mock_uow):
    mock_uow.users.update_role = AsyncMock(side_effect=ConnectionError("db down"))
    authority = build_role_authority(
        settings(DeploymentEnvironment.managed), mock_uow, idp_api.client()
    )

    event = await authority.change_role("user_plain", "support", "user_admin", "rota")

    assert event.old_role == GlobalRole.user
    assert idp_api.users["user_plain"]["private_metadata"]["globalRole"] == "support"
