"""
Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    ANY_LEVEL,
    FULL_ACCESS_ONLY,
    READ_ONLY_LEVELS,
    ROLE_HIERARCHY,
    WRITABLE_LEVELS,
    AccountStatus,
    GlobalRole,
    MembershipRole,
    PermissionLevel,
    ProjectStatus,
    SessionStatus,
)

# Export all entities
from .user import User
from .account import Account
from .membership import Membership
from .user_context import UserContext
from .project import Project
from .project_session import ProjectSession
from .project_permission import ProjectPermission

__all__ = [
    # Enums
    "GlobalRole",
    "ROLE_HIERARCHY",
    "MembershipRole",
    "AccountStatus",
    "PermissionLevel",
    "READ_ONLY_LEVELS",
    "WRITABLE_LEVELS",
    "FULL_ACCESS_ONLY",
    "ANY_LEVEL",
    "ProjectStatus",
    "SessionStatus",
    # Entities
    "User",
    "Account",
    "Membership",
    "UserContext",
    "Project",
    "ProjectSession",
    "ProjectPermission",
]
