"""
Account Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional

from pydantic import BaseModel


class AccountResponse(BaseModel):
    id: str
    name: str
    plan: str
    status: str
    role: str


class MembershipResponse(BaseModel):
    account_id: str
    user_id: str
    role: str


class RemoveMemberResponse(BaseModel):
    status: str


class SwitchAccountResponse(BaseModel):
    account_id: str
    account_name: str
    role: str
    last_switched_at: str
    context_data: dict
    previous_account_id: Optional[str] = None
