"""
Core Error Taxonomy

Typed errors raised by the authorization core. Route handlers translate
them to HTTP status codes; the core itself never speaks HTTP.
"""

from typing import Optional

from tenant_authz.libs.result import Error


class AppError(Exception):
    """Base class - carries a libs.result Error so use cases can return it"""

    code = "INTERNAL"
    default_message = "Internal error"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.error = Error(code or self.code, message or self.default_message)
        super().__init__(self.error.message)


class UnauthorizedError(AppError):
    code = "UNAUTHORIZED"
    default_message = "Authentication required"


class ForbiddenError(AppError):
    code = "FORBIDDEN"
    default_message = "Insufficient permissions"


class InsufficientRoleError(ForbiddenError):
    code = "INSUFFICIENT_ROLE"
    default_message = "Insufficient role"


class NotFoundError(AppError):
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class ConflictError(AppError):
    code = "CONFLICT"
    default_message = "Resource already exists"


class InternalError(AppError):
    code = "INTERNAL"
    default_message = "Internal error"


class TransactionError(InternalError):
    code = "TRANSACTION_FAILED"
    default_message = "Transaction could not be completed"


# Error codes grouped by kind, used to translate Result errors back to a kind
ERROR_KINDS = {
    UnauthorizedError: {"UNAUTHORIZED", "INVALID_TOKEN", "USER_NOT_FOUND"},
    ForbiddenError: {
        "FORBIDDEN",
        "INSUFFICIENT_ROLE",
        "NOT_A_MEMBER",
        "TENANT_ACCESS_DENIED",
        "TENANT_CONTEXT_UNAVAILABLE",
        "PERMISSION_REQUIRED",
    },
    NotFoundError: {
        "NOT_FOUND",
        "ACCOUNT_NOT_FOUND",
        "PROJECT_NOT_FOUND",
        "MEMBERSHIP_NOT_FOUND",
        "TARGET_USER_NOT_FOUND",
    },
    ValidationError: {
        "VALIDATION_ERROR",
        "INVALID_ROLE",
        "INVALID_PERMISSION_LEVEL",
        "INVALID_TENANT_ID",
        "TENANT_REQUIRED",
    },
    ConflictError: {"CONFLICT", "ALREADY_MEMBER", "CANNOT_REMOVE_LAST_OWNER"},
}


def error_kind(error: Error) -> type:
    """Map an Error code to its taxonomy class (InternalError when unknown)"""
    for kind, codes in ERROR_KINDS.items():
        if error.code in codes:
            return kind
    return InternalError
