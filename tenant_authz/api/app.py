import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tenant_authz.app.errors import AppError

from .error import ClientError, ServerError, from_app_error

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def handle_app_error(request: Request, exc: AppError):
    """Typed errors raised by dependencies (identity, tenant binding)"""
    http_error = from_app_error(exc)
    if isinstance(http_error, ClientError):
        return await handle_client_error(request, http_error)
    return await handle_server_error(request, http_error)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from tenant_authz.depends import bootstrap_super_users, shutdown

    await bootstrap_super_users()
    yield
    await shutdown()


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Tenant Authorization API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from tenant_authz.api.routes import accounts, admin, health_check, projects, user

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(user.router, tags=["User"])
    app.include_router(accounts.router, tags=["Accounts"])
    app.include_router(projects.router, tags=["Projects"])
    app.include_router(admin.router, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(AppError, handle_app_error)

    return app
