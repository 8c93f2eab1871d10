"""
Account Pydantic schemas.

Defines request and response models for the chart of accounts.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional, List
from backend.app.models.accounting_enums import AccountType, AccountRole
from backend.app.schemas.common import Money


class AccountCreate(BaseModel):
    """Schema for registering a new account."""
    code: str = Field(..., min_length=1, max_length=20, description="Unique account code")
    name: str = Field(..., min_length=1, max_length=200)
    type: AccountType
    subtype: str = Field("", max_length=50, description="e.g. current, fixed, long-term")
    role: Optional[AccountRole] = Field(None, description="Role used by financial ratio reports")
    parent_id: Optional[int] = None


class AccountUpdate(BaseModel):
    """
    Schema for updating account metadata.

    Balance is not updatable here; only posting changes it.
    """
    model_config = ConfigDict(extra="forbid")

    code: Optional[str] = Field(None, min_length=1, max_length=20)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    subtype: Optional[str] = Field(None, max_length=50)
    role: Optional[AccountRole] = None
    parent_id: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("code", "name", "subtype", "is_active")
    @classmethod
    def not_null(cls, value):
        # Omit a field to leave it unchanged; null is not a value for it
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class AccountResponse(BaseModel):
    """Schema for account response."""
    id: int
    code: str
    name: str
    type: AccountType
    subtype: str
    role: Optional[AccountRole]
    parent_id: Optional[int]
    balance: Money
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AccountListResponse(BaseModel):
    """Schema for account list."""
    accounts: List[AccountResponse]
