"""
Ledger API Endpoints.

Read-only, chronological view of posted movements.
"""

from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from backend.app.db.session import get_db
from backend.app.core.dependencies import PageParams
from backend.app.schemas.account import AccountResponse
from backend.app.schemas.common import Pagination
from backend.app.schemas.ledger import LedgerEntryResponse, LedgerListResponse
from backend.app.domain.accounting.account_registry import AccountRegistry
from backend.app.domain.accounting.balances import normal_sign
from backend.app.domain.accounting.ledger_store import LedgerStore

router = APIRouter(prefix="/accounting/ledger", tags=["Accounting - Ledger"])


@router.get("", response_model=LedgerListResponse)
async def list_ledger_entries(
    account_id: Optional[int] = Query(None, description="Account to drill into"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    paging: PageParams = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """
    Ledger rows in date order.

    With an account_id, each row also carries a running balance on the
    account's normal side, accumulated from zero at the start of the
    requested range.
    """
    account = None
    if account_id is not None:
        account = await AccountRegistry.get_account(db, account_id)

    rows, total, carried = await LedgerStore.query_by_account(
        db,
        account_id=account_id,
        start_date=start_date,
        end_date=end_date,
        page=paging.page,
        limit=paging.limit,
    )

    entries = [LedgerEntryResponse.model_validate(row) for row in rows]
    opening = None
    if account is not None:
        opening = carried * normal_sign(account.type)
        for entry, running in zip(entries, LedgerStore.running_balances(account.type, rows, opening)):
            entry.running_balance = running

    return LedgerListResponse(
        entries=entries,
        account=AccountResponse.model_validate(account) if account is not None else None,
        opening_balance=opening,
        pagination=Pagination.build(paging.page, paging.limit, total),
    )
