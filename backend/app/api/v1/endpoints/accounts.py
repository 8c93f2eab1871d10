"""
Chart of Accounts API Endpoints.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from backend.app.db.session import get_db
from backend.app.core.dependencies import get_actor
from backend.app.models.accounting_enums import AccountType
from backend.app.schemas.account import (
    AccountCreate, AccountUpdate, AccountResponse, AccountListResponse
)
from backend.app.domain.accounting.account_registry import AccountRegistry
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/accounting/accounts", tags=["Accounting - Accounts"])


@router.get("", response_model=AccountListResponse)
async def list_accounts(
    type: Optional[AccountType] = Query(None, description="Filter by account type"),
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    db: AsyncSession = Depends(get_db)
):
    """
    List accounts ordered by code.
    """
    accounts = await AccountRegistry.list_accounts(db, account_type=type, is_active=is_active)
    return AccountListResponse(accounts=[AccountResponse.model_validate(a) for a in accounts])


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(account_id: int, db: AsyncSession = Depends(get_db)):
    """Get a single account."""
    return await AccountRegistry.get_account(db, account_id)


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    data: AccountCreate,
    actor: Optional[str] = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new account with a zero balance.

    Returns 400 if the account code is already in use.
    """
    account = await AccountRegistry.create_account(db, data)

    await log_event(
        db=db,
        action=AuditAction.ACCOUNT_CREATED,
        actor=actor,
        entity_type="account",
        entity_id=account.id,
        metadata={"code": account.code, "type": account.type.value},
        commit=False
    )
    await db.commit()
    await db.refresh(account)

    return account


@router.put("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: int,
    data: AccountUpdate,
    actor: Optional[str] = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    """
    Update account metadata (name, code, subtype, role, active flag).

    Balances cannot be edited; they only change through posting.
    """
    account = await AccountRegistry.update_account(db, account_id, data)

    await log_event(
        db=db,
        action=AuditAction.ACCOUNT_UPDATED,
        actor=actor,
        entity_type="account",
        entity_id=account.id,
        metadata=data.model_dump(mode="json", exclude_unset=True),
        commit=False
    )
    await db.commit()
    await db.refresh(account)

    return account
