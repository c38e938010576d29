"""
User Management Use Cases

Identity sync, context loading and global role administration.
"""

from .bootstrap_super_users_use_case import BootstrapSuperUsersUseCase
from .change_role_use_case import ChangeRoleUseCase
from .dtos import (
    ChangeRoleResponse,
    LoadContextResponse,
    RoleResponse,
    RoleStatsResponse,
)
from .get_role_use_case import GetRoleUseCase, RoleStatsUseCase
from .load_context_use_case import LoadContextUseCase
from .sync_user_use_case import SyncUserUseCase

__all__ = [
    "BootstrapSuperUsersUseCase",
    "ChangeRoleUseCase",
    "GetRoleUseCase",
    "LoadContextUseCase",
    "RoleStatsUseCase",
    "SyncUserUseCase",
    "ChangeRoleResponse",
    "LoadContextResponse",
    "RoleResponse",
    "RoleStatsResponse",
]
