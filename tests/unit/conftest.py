from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def mock_uow():
    """UnitOfWork with every repository method mocked"""
    uow = MagicMock()
    uow.users = AsyncMock()
    uow.accounts = AsyncMock()
    uow.memberships = AsyncMock()
    uow.user_contexts = AsyncMock()
    uow.projects = AsyncMock()
    uow.project_sessions = AsyncMock()
    uow.project_permissions = AsyncMock()
    uow.bind_tenant = AsyncMock()
    uow.flush = AsyncMock()
    uow.tenant_id = None
    return uow


@pytest.fixture
def mock_session():
    """AsyncSession stand-in tracking transaction calls"""
    session = MagicMock()
    session.begin = AsyncMock()
    session.connection = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session
