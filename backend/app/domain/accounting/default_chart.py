"""
Default storefront chart of accounts.

Roles mark the accounts the ratio reports read (cash, bank, receivables,
inventory, prepaid, cost of goods sold).
"""

import logging
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from backend.app.models.account import Account
from backend.app.models.accounting_enums import AccountType, AccountRole
from backend.app.domain.accounting.balances import ZERO

logger = logging.getLogger("storefront.accounting.seed")

DEFAULT_CHART = [
    # code, name, type, subtype, role
    ("1000", "Cash", AccountType.ASSET, "current", AccountRole.CASH),
    ("1010", "Bank", AccountType.ASSET, "current", AccountRole.BANK),
    ("1100", "Accounts Receivable", AccountType.ASSET, "current", AccountRole.RECEIVABLES),
    ("1200", "Inventory", AccountType.ASSET, "current", AccountRole.INVENTORY),
    ("1300", "Prepaid Expenses", AccountType.ASSET, "current", AccountRole.PREPAID),
    ("1500", "Equipment", AccountType.ASSET, "fixed", None),
    ("2000", "Accounts Payable", AccountType.LIABILITY, "current", None),
    ("2100", "GST Payable", AccountType.LIABILITY, "current", None),
    ("2500", "Long-term Loan", AccountType.LIABILITY, "long-term", None),
    ("3000", "Owner's Capital", AccountType.EQUITY, "capital", None),
    ("3100", "Retained Earnings", AccountType.EQUITY, "retained-earnings", None),
    ("4000", "Sales Revenue", AccountType.REVENUE, "operating", None),
    ("4100", "Other Income", AccountType.REVENUE, "other", None),
    ("5000", "Cost of Goods Sold", AccountType.EXPENSE, "cost-of-goods", AccountRole.COGS),
    ("5100", "Salaries", AccountType.EXPENSE, "administrative", None),
    ("5200", "Rent", AccountType.EXPENSE, "operating", None),
    ("5300", "Utilities", AccountType.EXPENSE, "operating", None),
]


async def seed_default_chart(db: AsyncSession) -> List[Account]:
    """
    Insert any default accounts whose code is not registered yet.

    Existing accounts are left untouched. Does not commit.

    Returns:
        The accounts that were created
    """
    existing = set((await db.execute(select(Account.code))).scalars().all())

    created = []
    for code, name, account_type, subtype, role in DEFAULT_CHART:
        if code in existing:
            continue
        account = Account(
            code=code,
            name=name,
            type=account_type,
            subtype=subtype,
            role=role,
            balance=ZERO,
            is_active=True,
        )
        db.add(account)
        created.append(account)

    await db.flush()
    logger.info("Chart of accounts seeded", extra={"created_count": len(created), "skipped_count": len(DEFAULT_CHART) - len(created)})
    return created
