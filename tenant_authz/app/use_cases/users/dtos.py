"""
User Use Case DTOs (Data Transfer Objects)
"""

from typing import List, Optional

from pydantic import BaseModel


class UserInfo(BaseModel):
    id: str
    external_id: str
    email: Optional[str]
    global_role: str


class CurrentContextInfo(BaseModel):
    account_id: str
    account_name: Optional[str]
    account_plan: Optional[str]
    role: Optional[str]
    last_switched_at: str
    context_data: dict


class AvailableAccountInfo(BaseModel):
    id: str
    name: str
    plan: str
    status: str
    role: str


class LoadContextResponse(BaseModel):
    user: UserInfo
    current_context: Optional[CurrentContextInfo]
    available_accounts: List[AvailableAccountInfo]


class RoleResponse(BaseModel):
    external_id: str
    role: str


class ChangeRoleResponse(BaseModel):
    status: str
    external_id: str
    old_role: str
    new_role: str


class RoleStatsResponse(BaseModel):
    total_users: int
    super_admins: int
    admins: int
    support: int
