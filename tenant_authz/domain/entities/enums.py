"""
Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class GlobalRole(str, Enum):
    """User-wide privilege level, ordered user < support < admin < super_admin"""

    user = "user"
    support = "support"
    admin = "admin"
    super_admin = "super_admin"

    @property
    def rank(self) -> int:
        return ROLE_HIERARCHY.index(self)


ROLE_HIERARCHY = [
    GlobalRole.user,
    GlobalRole.support,
    GlobalRole.admin,
    GlobalRole.super_admin,
]


class MembershipRole(str, Enum):
    """User role within an account"""

    owner = "owner"
    admin = "admin"
    member = "member"
    viewer = "viewer"


class AccountStatus(str, Enum):
    active = "active"
    suspended = "suspended"


class PermissionLevel(str, Enum):
    """Per-project capability grade"""

    read = "read"
    read_notes = "read_notes"
    read_write = "read_write"
    full_access = "full_access"


READ_ONLY_LEVELS = [PermissionLevel.read, PermissionLevel.read_notes]
WRITABLE_LEVELS = [PermissionLevel.read_write, PermissionLevel.full_access]
FULL_ACCESS_ONLY = [PermissionLevel.full_access]
ANY_LEVEL = READ_ONLY_LEVELS + WRITABLE_LEVELS


class ProjectStatus(str, Enum):
    active = "active"
    archived = "archived"


class SessionStatus(str, Enum):
    planned = "planned"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"
