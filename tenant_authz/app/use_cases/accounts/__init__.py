"""
Account Use Cases

Account creation, membership management and context switching.
"""

from .add_member_use_case import AddMemberUseCase
from .create_account_use_case import CreateAccountUseCase
from .dtos import (
    AccountResponse,
    MembershipResponse,
    RemoveMemberResponse,
    SwitchAccountResponse,
)
from .remove_member_use_case import RemoveMemberUseCase
from .switch_account_use_case import SwitchAccountUseCase

__all__ = [
    "AddMemberUseCase",
    "CreateAccountUseCase",
    "RemoveMemberUseCase",
    "SwitchAccountUseCase",
    "AccountResponse",
    "MembershipResponse",
    "RemoveMemberResponse",
    "SwitchAccountResponse",
]
