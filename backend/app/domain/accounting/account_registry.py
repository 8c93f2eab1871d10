"""
Account Registry (Domain Logic).

Owns the chart of accounts: registration, code uniqueness, classification
and metadata edits. Balances are never written here.
"""

import logging
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from backend.app.core.exceptions import (
    DuplicateAccountCodeError, InvalidAccountError, ResourceNotFoundError
)
from backend.app.models.account import Account
from backend.app.models.accounting_enums import AccountType
from backend.app.schemas.account import AccountCreate, AccountUpdate
from backend.app.domain.accounting.balances import ZERO

logger = logging.getLogger("storefront.accounting.accounts")


class AccountRegistry:

    @staticmethod
    async def create_account(db: AsyncSession, data: AccountCreate) -> Account:
        """
        Register a new account with a zero balance.

        Raises:
            DuplicateAccountCodeError: code already registered
            ResourceNotFoundError: parent_id does not exist
        """
        existing = await db.execute(select(Account.id).where(Account.code == data.code))
        if existing.scalar_one_or_none() is not None:
            raise DuplicateAccountCodeError(data.code)

        if data.parent_id is not None:
            await AccountRegistry.get_account(db, data.parent_id)

        account = Account(
            code=data.code,
            name=data.name,
            type=data.type,
            subtype=data.subtype,
            role=data.role,
            parent_id=data.parent_id,
            balance=ZERO,
            is_active=True,
        )
        db.add(account)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same code
            await db.rollback()
            raise DuplicateAccountCodeError(data.code)

        logger.info("Account created", extra={"account_id": account.id, "code": account.code})
        return account

    @staticmethod
    async def get_account(db: AsyncSession, account_id: int) -> Account:
        account = await db.get(Account, account_id, populate_existing=True)
        if account is None:
            raise ResourceNotFoundError("Account", account_id)
        return account

    @staticmethod
    async def list_accounts(
        db: AsyncSession,
        account_type: Optional[AccountType] = None,
        is_active: Optional[bool] = None,
    ) -> List[Account]:
        """Accounts ordered by code ascending, optionally filtered."""
        query = select(Account).order_by(Account.code).execution_options(populate_existing=True)
        if account_type is not None:
            query = query.where(Account.type == account_type)
        if is_active is not None:
            query = query.where(Account.is_active == is_active)

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def _ensure_no_cycle(db: AsyncSession, account_id: int, parent_id: int) -> None:
        """Walk up from the proposed parent; reaching the account itself is a cycle."""
        seen = set()
        current = parent_id
        while current is not None and current not in seen:
            if current == account_id:
                raise InvalidAccountError(
                    "Account cannot be its own ancestor",
                    details={"id": account_id, "parent_id": parent_id}
                )
            seen.add(current)
            current = (await AccountRegistry.get_account(db, current)).parent_id

    @staticmethod
    async def update_account(db: AsyncSession, account_id: int, data: AccountUpdate) -> Account:
        """
        Apply a partial metadata update.

        Raises:
            ResourceNotFoundError: unknown account (or parent)
            DuplicateAccountCodeError: new code already taken
            InvalidAccountError: new parent would create a cycle
        """
        account = await AccountRegistry.get_account(db, account_id)
        changes = data.model_dump(exclude_unset=True)

        new_code = changes.get("code")
        if new_code is not None and new_code != account.code:
            clash = await db.execute(select(Account.id).where(Account.code == new_code))
            if clash.scalar_one_or_none() is not None:
                raise DuplicateAccountCodeError(new_code)

        if changes.get("parent_id") is not None:
            await AccountRegistry._ensure_no_cycle(db, account_id, changes["parent_id"])

        for field, value in changes.items():
            setattr(account, field, value)

        await db.flush()
        logger.info("Account updated", extra={"account_id": account.id, "fields": sorted(changes)})
        return account
