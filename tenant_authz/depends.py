import logging
from typing import Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from tenant_authz.adapter.services.identity_provider_client import HttpIdentityProvider
from tenant_authz.adapter.services.request_transaction import RequestTransaction
from tenant_authz.adapter.services.role_stores import build_role_authority
from tenant_authz.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tenant_authz.api.utils.jwt import verify_jwt
from tenant_authz.app.errors import UnauthorizedError, ValidationError
from tenant_authz.app.services.identity_provider import IIdentityProvider
from tenant_authz.app.services.role_authority import RoleAuthority
from tenant_authz.app.services.tenant_context import TenantContext, TenantContextBinder
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.app.use_cases.users import BootstrapSuperUsersUseCase, SyncUserUseCase
from tenant_authz.domain.environment import EnvironmentSettings

logger = logging.getLogger(__name__)

engine_options = {"echo": False, "future": True}
if not ApplicationConfig.DB_URI.startswith("sqlite"):
    engine_options.update(
        pool_size=ApplicationConfig.DB_POOL_SIZE,
        max_overflow=ApplicationConfig.DB_MAX_OVERFLOW,
    )

engine = create_async_engine(ApplicationConfig.DB_URI, **engine_options)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# Resolved once; every role decision in the process uses this value
ENVIRONMENT = EnvironmentSettings.resolve(
    app_env=ApplicationConfig.APP_ENV,
    db_uri=ApplicationConfig.DB_URI,
    idp_secret_key=ApplicationConfig.IDP_SECRET_KEY,
    explicit=ApplicationConfig.DEPLOYMENT_ENVIRONMENT,
)

_identity_provider: Optional[HttpIdentityProvider] = None

security = HTTPBearer(auto_error=False)


async def get_unit_of_work(request: Request):
    """
    One transaction per request. Depend on it with scope="function" so commit
    or rollback finishes before the response is sent.
    """
    async with RequestTransaction(AsyncSessionLocal) as transaction:
        request.state.transaction = transaction
        yield SqlAlchemyUnitOfWork(transaction.session, ApplicationConfig.TENANT_SETTING_KEY)


def get_environment() -> EnvironmentSettings:
    return ENVIRONMENT


def get_identity_provider() -> Optional[IIdentityProvider]:
    global _identity_provider
    if not ENVIRONMENT.identity_provider_enabled:
        return None
    if _identity_provider is None:
        _identity_provider = HttpIdentityProvider(
            ApplicationConfig.IDP_API_URL,
            ApplicationConfig.IDP_SECRET_KEY,
            timeout=ApplicationConfig.IDP_TIMEOUT_SECONDS,
        )
    return _identity_provider


def get_role_authority(
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
    identity_provider: Optional[IIdentityProvider] = Depends(get_identity_provider),
    settings: EnvironmentSettings = Depends(get_environment),
) -> RoleAuthority:
    return build_role_authority(settings, uow, identity_provider)


def _dev_identity(x_user_id: Optional[str]) -> Optional[dict]:
    if not x_user_id:
        return None
    if not ApplicationConfig.AUTH_DISABLED or ApplicationConfig.APP_ENV == "production":
        return None
    return {"sub": x_user_id}


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_user_id: Optional[str] = Header(None),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
    identity_provider: Optional[IIdentityProvider] = Depends(get_identity_provider),
) -> dict:
    """
    Resolve the caller's external identity and make sure a User row exists.

    Returns:
        dict with `external_id` and `email` (None when unknown)

    Raises:
        UnauthorizedError: no credentials, or an invalid or expired token
    """
    if credentials is not None:
        payload = verify_jwt(credentials.credentials)
        if payload is None:
            raise UnauthorizedError("Invalid or expired token", code="INVALID_TOKEN")
    else:
        payload = _dev_identity(x_user_id)
        if payload is None:
            raise UnauthorizedError("Authentication required")

    identity = {"external_id": payload["sub"], "email": payload.get("email")}

    try:
        result = await SyncUserUseCase(uow, identity_provider).execute(
            identity["external_id"], identity["email"]
        )
        if result.is_err():
            logger.warning(f"User sync skipped for {identity['external_id']}: {result.error.message}")
    except Exception as exc:
        logger.error(f"User sync failed for {identity['external_id']}: {exc}")

    return identity


async def bind_tenant_context(
    request: Request,
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
) -> Optional[TenantContext]:
    raw_account_id = request.headers.get(ApplicationConfig.TENANT_HEADER)
    return await TenantContextBinder(uow).bind(identity["external_id"], raw_account_id)


async def require_tenant_context(
    request: Request,
    tenant: Optional[TenantContext] = Depends(bind_tenant_context),
) -> Optional[TenantContext]:
    """
    Routes that read tenant-owned rows need the tenant header.

    A present header whose binding degraded returns None; the use case then
    refuses with TENANT_CONTEXT_UNAVAILABLE.
    """
    if not request.headers.get(ApplicationConfig.TENANT_HEADER):
        raise ValidationError(
            f"Header {ApplicationConfig.TENANT_HEADER} is required", code="TENANT_REQUIRED"
        )
    return tenant


async def bootstrap_super_users() -> None:
    if not ENVIRONMENT.is_local:
        return
    try:
        async with RequestTransaction(AsyncSessionLocal) as transaction:
            uow = SqlAlchemyUnitOfWork(transaction.session, ApplicationConfig.TENANT_SETTING_KEY)
            result = await BootstrapSuperUsersUseCase(uow, ENVIRONMENT).execute(
                ApplicationConfig.BOOTSTRAP_SUPER_USERS
            )
        logger.info(f"Local super users ready: {result.value}")
    except Exception as exc:
        logger.error(f"Super user bootstrap failed: {exc}")


async def shutdown() -> None:
    global _identity_provider
    if _identity_provider is not None:
        await _identity_provider.aclose()
        _identity_provider = None
    await engine.dispose()
