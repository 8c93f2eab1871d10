"""
Posting Processor (Domain Logic).

Turns a draft journal entry into permanent ledger effects.
Must be transactional and idempotent.
"""

import logging
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from backend.app.core.exceptions import (
    ResourceNotFoundError, EntryAlreadyPostedError, PostingFailedError
)
from backend.app.models.account import Account
from backend.app.models.journal_entry import JournalEntry, JournalLine
from backend.app.domain.accounting.balances import balance_change
from backend.app.domain.accounting.journal_engine import JournalEngine
from backend.app.domain.accounting.ledger_store import LedgerStore

logger = logging.getLogger("storefront.accounting.posting")


class PostingProcessor:

    @staticmethod
    async def _claim(db: AsyncSession, entry_id: int) -> bool:
        """
        Atomically flip is_posted False -> True.

        Only one caller can ever match the WHERE clause, so a concurrent
        second posting sees zero rows.
        """
        result = await db.execute(
            update(JournalEntry)
            .where(JournalEntry.id == entry_id, JournalEntry.is_posted.is_(False))
            .values(is_posted=True, posted_at=datetime.now(timezone.utc))
            .returning(JournalEntry.id)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def _apply_line(db: AsyncSession, entry: JournalEntry, line: JournalLine) -> None:
        account_type = (
            await db.execute(select(Account.type).where(Account.id == line.account_id))
        ).scalar_one()
        change = balance_change(account_type, line.debit, line.credit)

        # Atomic increment; never read-modify-write
        new_balance = (
            await db.execute(
                update(Account)
                .where(Account.id == line.account_id)
                .values(balance=Account.balance + change)
                .returning(Account.balance)
                .execution_options(synchronize_session=False)
            )
        ).scalar_one()

        await LedgerStore.append_entry(
            db,
            account_id=line.account_id,
            journal_entry_id=entry.id,
            date=entry.date,
            description=entry.description,
            debit=line.debit,
            credit=line.credit,
            balance=new_balance,
        )

    @staticmethod
    async def post_entry(db: AsyncSession, entry_id: int) -> JournalEntry:
        """
        Post a journal entry exactly once.

        Flow:
        1. Claim the entry (conditional update on is_posted = False)
        2. For each line, in order: atomically move the account balance and
           append a ledger row with the new balance snapshot
        3. Commit everything as one transaction

        Any failure in step 2 rolls back the claim, the balance moves and the
        ledger rows together.

        Raises:
            ResourceNotFoundError: entry does not exist
            EntryAlreadyPostedError: entry was already posted
            PostingFailedError: posting was rolled back
        """
        if not await PostingProcessor._claim(db, entry_id):
            exists = (
                await db.execute(select(JournalEntry.id).where(JournalEntry.id == entry_id))
            ).scalar_one_or_none()
            await db.rollback()
            if exists is None:
                raise ResourceNotFoundError("Journal entry", entry_id)
            logger.warning("Rejected double posting", extra={"entry_id": entry_id})
            raise EntryAlreadyPostedError(entry_id)

        try:
            entry = await JournalEngine.get_entry(db, entry_id)
            for line in entry.lines:
                await PostingProcessor._apply_line(db, entry, line)
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error("Posting rolled back", exc_info=exc, extra={"entry_id": entry_id})
            raise PostingFailedError(entry_id, reason=type(exc).__name__) from exc

        logger.info(
            "Journal entry posted",
            extra={"entry_id": entry_id, "entry_number": entry.entry_number, "lines": len(entry.lines)}
        )
        return await JournalEngine.get_entry(db, entry_id)
