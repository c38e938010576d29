"""
UserContext Entity

Per-user singleton recording the currently active account.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import JSON, Column, DateTime, Field, SQLModel

from tenant_authz.domain.base import utcnow


class UserContext(SQLModel, table=True):
    """
    UserContext entity - the account a user is currently acting in.

    Business Rules:
    - One row per user
    - current_account_id must reference an account the user is a member of
    - context_data is a free-form payload, shallow-merged on every switch
    """

    __tablename__ = "user_context"

    user_id: UUID = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    current_account_id: UUID = Field(foreign_key="accounts.id", nullable=False)

    last_switched_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    context_data: Optional[dict] = Field(default=None, sa_column=Column(JSON))
