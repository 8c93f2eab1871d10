"""
Journal Entry Pydantic schemas.
"""

import datetime as dt
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from backend.app.schemas.common import Money, Pagination


class JournalLineCreate(BaseModel):
    """One debit or credit line of a new journal entry."""
    account_id: int
    debit: Decimal = Field(Decimal("0"), ge=0, max_digits=18, decimal_places=2)
    credit: Decimal = Field(Decimal("0"), ge=0, max_digits=18, decimal_places=2)
    narration: Optional[str] = Field(None, max_length=255)


class JournalEntryCreate(BaseModel):
    """Schema for creating a journal entry (draft)."""
    date: dt.date
    description: str = Field(..., min_length=1, max_length=500)
    lines: List[JournalLineCreate] = Field(..., min_length=2)
    created_by: Optional[str] = Field(None, max_length=100)


class JournalEntryUpdate(BaseModel):
    """Schema for editing a draft journal entry."""
    model_config = ConfigDict(extra="forbid")

    date: Optional[dt.date] = None
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    lines: Optional[List[JournalLineCreate]] = Field(None, min_length=2)

    @field_validator("date", "description", "lines")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class JournalLineResponse(BaseModel):
    id: int
    line_number: int
    account_id: int
    account_code: Optional[str]
    account_name: Optional[str]
    debit: Money
    credit: Money
    narration: Optional[str]

    class Config:
        from_attributes = True


class JournalEntryResponse(BaseModel):
    """Schema for journal entry response."""
    id: int
    entry_number: str
    date: dt.date
    description: str
    lines: List[JournalLineResponse]
    total_debit: Money
    total_credit: Money
    is_posted: bool
    posted_at: Optional[dt.datetime]
    created_by: Optional[str]
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class JournalEntryListResponse(BaseModel):
    """Schema for paginated journal entry list."""
    entries: List[JournalEntryResponse]
    pagination: Pagination
