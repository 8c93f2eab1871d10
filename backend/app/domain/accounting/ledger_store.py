"""
Ledger Store (Domain Logic).

Append-only history of posted balance movements per account, plus the
aggregate queries used to replay balances for reports.
READ-ONLY apart from append_entry.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, List, Tuple, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from backend.app.models.ledger_entry import LedgerEntry
from backend.app.domain.accounting.balances import ZERO, to_money, normal_sign

# (debit_total, credit_total) per account id
Movements = Dict[int, Tuple[Decimal, Decimal]]


def _range_conditions(account_id: Optional[int], start_date: Optional[date], end_date: Optional[date]) -> list:
    conditions = []
    if account_id is not None:
        conditions.append(LedgerEntry.account_id == account_id)
    if start_date is not None:
        conditions.append(LedgerEntry.date >= start_date)
    if end_date is not None:
        conditions.append(LedgerEntry.date <= end_date)
    return conditions


class LedgerStore:

    @staticmethod
    async def append_entry(
        db: AsyncSession,
        account_id: int,
        journal_entry_id: int,
        date: date,
        description: Optional[str],
        debit,
        credit,
        balance,
    ) -> LedgerEntry:
        """Insert one immutable ledger row. Never touches existing rows."""
        row = LedgerEntry(
            account_id=account_id,
            journal_entry_id=journal_entry_id,
            date=date,
            description=description,
            debit=to_money(debit),
            credit=to_money(credit),
            balance=to_money(balance),
        )
        db.add(row)
        await db.flush()
        return row

    @staticmethod
    async def query_by_account(
        db: AsyncSession,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[LedgerEntry], int, Decimal]:
        """
        Chronological ledger rows (date, then insertion order).

        Returns:
            (rows, total matching rows, net debit-minus-credit of the matching
            rows that precede this page)
        """
        conditions = _range_conditions(account_id, start_date, end_date)
        ordering = (LedgerEntry.date.asc(), LedgerEntry.id.asc())
        offset = (page - 1) * limit

        total = (await db.execute(select(func.count(LedgerEntry.id)).where(*conditions))).scalar() or 0

        result = await db.execute(
            select(LedgerEntry).where(*conditions).order_by(*ordering).offset(offset).limit(limit)
        )
        rows = list(result.scalars().all())

        carried = ZERO
        if offset:
            earlier = (
                select(LedgerEntry.debit, LedgerEntry.credit)
                .where(*conditions)
                .order_by(*ordering)
                .limit(offset)
                .subquery()
            )
            carried = to_money(
                (await db.execute(select(func.sum(earlier.c.debit - earlier.c.credit)))).scalar()
            )
        return rows, total, carried

    @staticmethod
    def running_balances(account_type, rows: List[LedgerEntry], opening: Decimal = ZERO) -> List[Decimal]:
        """
        Accumulate rows on the account's normal side, starting at `opening`.

        Independent of the per-row `balance` snapshot, which is global.
        """
        sign = normal_sign(account_type)
        running = to_money(opening)
        balances = []
        for row in rows:
            running += (to_money(row.debit) - to_money(row.credit)) * sign
            balances.append(running)
        return balances

    @staticmethod
    async def movements(
        db: AsyncSession,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Movements:
        """Debit and credit totals per account over an optional date range."""
        result = await db.execute(
            select(
                LedgerEntry.account_id,
                func.sum(LedgerEntry.debit),
                func.sum(LedgerEntry.credit),
            )
            .where(*_range_conditions(None, start_date, end_date))
            .group_by(LedgerEntry.account_id)
        )
        return {
            account_id: (to_money(debit), to_money(credit))
            for account_id, debit, credit in result.all()
        }

    @staticmethod
    async def balances_as_of(db: AsyncSession, as_of: date) -> Movements:
        """Movements from the first posting up to and including `as_of`."""
        return await LedgerStore.movements(db, end_date=as_of)

    @staticmethod
    async def activity_between(db: AsyncSession, start_date: date, end_date: date) -> Movements:
        return await LedgerStore.movements(db, start_date=start_date, end_date=end_date)

