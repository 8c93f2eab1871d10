"""
Ledger Pydantic schemas.
"""

import datetime as dt
from pydantic import BaseModel
from typing import Optional, List
from backend.app.schemas.account import AccountResponse
from backend.app.schemas.common import Money, Pagination


class LedgerEntryResponse(BaseModel):
    """
    One ledger row.

    `balance` is the account's stored balance right after posting;
    `running_balance` is accumulated over the requested range only.
    """
    id: int
    account_id: int
    journal_entry_id: int
    date: dt.date
    description: Optional[str]
    debit: Money
    credit: Money
    balance: Money
    running_balance: Optional[Money] = None
    created_at: dt.datetime

    class Config:
        from_attributes = True


class LedgerListResponse(BaseModel):
    """Chronological ledger page."""
    entries: List[LedgerEntryResponse]
    account: Optional[AccountResponse] = None
    opening_balance: Optional[Money] = None
    pagination: Pagination
