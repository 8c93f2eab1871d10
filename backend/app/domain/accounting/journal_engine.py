"""
Journal Engine (Domain Logic).

Validates and stores draft journal entries. Enforces the debit = credit
invariant and keeps posted entries immutable.
"""

import logging
from datetime import date
from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
from sqlalchemy.orm import selectinload

from backend.app.core.config import settings
from backend.app.core.exceptions import ResourceNotFoundError, UnbalancedEntryError, InvalidEntryError
from backend.app.models.account import Account
from backend.app.models.journal_entry import JournalEntry, JournalLine
from backend.app.schemas.journal import JournalEntryCreate, JournalEntryUpdate, JournalLineCreate
from backend.app.domain.accounting.balances import ZERO, to_money, is_within_tolerance
from backend.app.domain.accounting.entry_numbers import generate_entry_number

logger = logging.getLogger("storefront.accounting.journal")


def compute_totals(lines: List[JournalLineCreate]) -> Tuple:
    total_debit = sum((to_money(line.debit) for line in lines), ZERO)
    total_credit = sum((to_money(line.credit) for line in lines), ZERO)
    return total_debit, total_credit


def validate_balanced(lines: List[JournalLineCreate]) -> Tuple:
    """
    Check the double-entry invariant.

    Returns:
        (total_debit, total_credit)

    Raises:
        InvalidEntryError: a line carries both a debit and a credit
        UnbalancedEntryError: totals differ by more than the tolerance, or are zero
    """
    for number, line in enumerate(lines, start=1):
        if line.debit > 0 and line.credit > 0:
            raise InvalidEntryError(
                "A line cannot carry both a debit and a credit", details={"line_number": number}
            )

    total_debit, total_credit = compute_totals(lines)
    if not is_within_tolerance(total_debit, total_credit, settings.balance_tolerance):
        raise UnbalancedEntryError(total_debit, total_credit)
    if total_debit <= 0:
        raise UnbalancedEntryError(total_debit, total_credit, message="Entry total must be greater than zero")
    return total_debit, total_credit


async def _ensure_accounts_exist(db: AsyncSession, lines: List[JournalLineCreate]) -> None:
    wanted = {line.account_id for line in lines}
    result = await db.execute(select(Account.id).where(Account.id.in_(wanted)))
    missing = wanted - set(result.scalars().all())
    if missing:
        raise ResourceNotFoundError("Account", sorted(missing)[0])


def _build_lines(lines: List[JournalLineCreate]) -> List[JournalLine]:
    return [
        JournalLine(
            line_number=index,
            account_id=line.account_id,
            debit=to_money(line.debit),
            credit=to_money(line.credit),
            narration=line.narration,
        )
        for index, line in enumerate(lines, start=1)
    ]


class JournalEngine:

    @staticmethod
    async def create_entry(db: AsyncSession, data: JournalEntryCreate) -> JournalEntry:
        """
        Validate and store a draft journal entry.

        Flow:
        1. Balance check (debits = credits, non-zero)
        2. Referenced accounts exist
        3. Allocate entry number
        4. Persist as draft (is_posted = False)
        """
        total_debit, total_credit = validate_balanced(data.lines)
        await _ensure_accounts_exist(db, data.lines)

        entry = JournalEntry(
            entry_number=await generate_entry_number(db),
            date=data.date,
            description=data.description,
            total_debit=total_debit,
            total_credit=total_credit,
            is_posted=False,
            created_by=data.created_by,
            lines=_build_lines(data.lines),
        )
        db.add(entry)
        await db.flush()

        logger.info(
            "Journal entry created",
            extra={"entry_id": entry.id, "entry_number": entry.entry_number, "total": str(total_debit)}
        )
        return entry

    @staticmethod
    async def get_entry(db: AsyncSession, entry_id: int) -> JournalEntry:
        result = await db.execute(
            select(JournalEntry)
            .options(selectinload(JournalEntry.lines).selectinload(JournalLine.account))
            .where(JournalEntry.id == entry_id)
            .execution_options(populate_existing=True)
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            raise ResourceNotFoundError("Journal entry", entry_id)
        return entry

    @staticmethod
    async def list_entries(
        db: AsyncSession,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        is_posted: Optional[bool] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[JournalEntry], int]:
        """Entries newest first (date, then creation time), with the filtered total."""
        conditions = []
        if is_posted is not None:
            conditions.append(JournalEntry.is_posted == is_posted)
        if start_date is not None:
            conditions.append(JournalEntry.date >= start_date)
        if end_date is not None:
            conditions.append(JournalEntry.date <= end_date)

        total = (await db.execute(select(func.count(JournalEntry.id)).where(*conditions))).scalar() or 0

        query = (
            select(JournalEntry)
            .options(selectinload(JournalEntry.lines).selectinload(JournalLine.account))
            .where(*conditions)
            .order_by(JournalEntry.date.desc(), JournalEntry.created_at.desc(), JournalEntry.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all()), total

    @staticmethod
    async def update_entry(db: AsyncSession, entry_id: int, data: JournalEntryUpdate) -> JournalEntry:
        """
        Edit a draft entry.

        The header update is conditional on is_posted = False, so a posted
        (or concurrently posting) entry is never modified.

        Raises:
            ResourceNotFoundError: entry missing or already posted
            UnbalancedEntryError: replacement lines do not balance
        """
        draft = await db.execute(
            select(JournalEntry.id).where(JournalEntry.id == entry_id, JournalEntry.is_posted.is_(False))
        )
        if draft.scalar_one_or_none() is None:
            raise ResourceNotFoundError("Journal entry", entry_id, message="Entry not found or already posted")

        changes = data.model_dump(exclude_unset=True, exclude={"lines"})
        if data.lines is not None:
            total_debit, total_credit = validate_balanced(data.lines)
            await _ensure_accounts_exist(db, data.lines)
            changes["total_debit"] = total_debit
            changes["total_credit"] = total_credit

        result = await db.execute(
            update(JournalEntry)
            .where(JournalEntry.id == entry_id, JournalEntry.is_posted.is_(False))
            .values(**changes, updated_at=func.now())
            .returning(JournalEntry.id)
            .execution_options(synchronize_session=False)
        )
        if result.scalar_one_or_none() is None:
            raise ResourceNotFoundError("Journal entry", entry_id, message="Entry not found or already posted")

        if data.lines is not None:
            await db.execute(delete(JournalLine).where(JournalLine.journal_entry_id == entry_id))
            for line in _build_lines(data.lines):
                line.journal_entry_id = entry_id
                db.add(line)

        await db.flush()
        logger.info("Journal entry updated", extra={"entry_id": entry_id, "fields": sorted(data.model_fields_set)})
        return await JournalEngine.get_entry(db, entry_id)
