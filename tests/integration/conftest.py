from typing import Optional

import pytest_asyncio
from fastapi import Request
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from tenant_authz.adapter.services.request_transaction import RequestTransaction
from tenant_authz.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tenant_authz.api.app import create_app
from tenant_authz.api.utils.jwt import generate_jwt
from tenant_authz.depends import get_environment, get_identity_provider, get_unit_of_work
from tenant_authz.domain.entities import (
    Account,
    Membership,
    PermissionLevel,
    Project,
    ProjectPermission,
    User,
)
from tenant_authz.domain.environment import DeploymentEnvironment, EnvironmentSettings

LOCAL = EnvironmentSettings(
    environment=DeploymentEnvironment.local,
    identity_provider_enabled=False,
    rich_logging=True,
)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work(request: Request):
        async with RequestTransaction(session_factory) as transaction:
            request.state.transaction = transaction
            yield SqlAlchemyUnitOfWork(transaction.session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_identity_provider] = lambda: None
    app.dependency_overrides[get_environment] = lambda: LOCAL

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
def seed(session_factory):
    """Persist entities in their own committed transaction"""

    async def _seed(*entities):
        async with session_factory() as session:
            for entity in entities:
                session.add(entity)
            await session.commit()
        return entities

    return _seed


@pytest_asyncio.fixture
def fetch(session_factory):
    """Run a query in a fresh session so results reflect committed state"""

    async def _fetch(stmt):
        async with session_factory() as session:
            result = await session.exec(stmt)
            return list(result.all())

    return _fetch


@pytest_asyncio.fixture
def make_user(seed):
    async def _make_user(external_id: str, **fields) -> User:
        user = User(external_id=external_id, email=f"{external_id}@acme.test", **fields)
        await seed(user)
        return user

    return _make_user


@pytest_asyncio.fixture
def make_account(seed):
    async def _make_account(name: str, *members) -> Account:
        """members: (user, MembershipRole) pairs"""
        account = Account(name=name)
        await seed(account)
        await seed(
            *[Membership(account_id=account.id, user_id=u.id, role=role) for u, role in members]
        )
        return account

    return _make_account


@pytest_asyncio.fixture
def make_project(seed):
    async def _make_project(account: Account, creator: User, name: str = "Project") -> Project:
        project = Project(account_id=account.id, name=name, created_by=creator.id)
        await seed(project)
        await seed(
            ProjectPermission(
                project_id=project.id,
                user_id=creator.id,
                permission_level=PermissionLevel.full_access,
                granted_by=creator.id,
            )
        )
        return project

    return _make_project


def _auth_headers(user: User, account: Optional[Account] = None) -> dict:
    headers = {"Authorization": f"Bearer {generate_jwt(user.external_id, user.email)}"}
    if account is not None:
        headers[ApplicationConfig.TENANT_HEADER] = str(account.id)
    return headers


@pytest_asyncio.fixture
def auth_headers():
    """Bearer token for the user, plus the tenant header when an account is given"""
    return _auth_headers
