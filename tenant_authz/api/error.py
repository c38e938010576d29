from fastapi import status

from tenant_authz.app.errors import (
    AppError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
    error_kind,
)
from tenant_authz.libs.result import Error

STATUS_BY_KIND = {
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def status_for(kind: type) -> int:
    for base, status_code in STATUS_BY_KIND.items():
        if issubclass(kind, base):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_error(error: Error) -> Exception:
    """ClientError for caller mistakes, ServerError for everything else"""
    status_code = status_for(error_kind(error))
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return ServerError(error)
    return ClientError(error, status_code=status_code)


def from_app_error(exc: AppError) -> Exception:
    status_code = status_for(type(exc))
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return ServerError(exc.error)
    return ClientError(exc.error, status_code=status_code)
