"""
Ledger Entry database model.

Immutable per-account history produced by posting journal entries.
"""

from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.sql import func
from backend.app.db.session import Base


class LedgerEntry(Base):
    """
    Ledger Entry model.

    One row per posted journal line.
    `balance` is the account's stored balance right after this row was
    applied (a global snapshot, not a range-scoped running balance).
    NO updates or deletions allowed.
    """
    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Linkage
    account_id = Column(Integer, ForeignKey('accounts.id'), nullable=False, index=True)
    journal_entry_id = Column(Integer, ForeignKey('journal_entries.id'), nullable=False, index=True)

    # Entry details
    date = Column(Date, nullable=False, index=True)
    description = Column(String(500), nullable=True)

    # Financials
    debit = Column(Numeric(18, 2), nullable=False, default=0)
    credit = Column(Numeric(18, 2), nullable=False, default=0)
    balance = Column(Numeric(18, 2), nullable=False)

    # Timestamps (Immutable - no updated_at)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<LedgerEntry(id={self.id}, account={self.account_id}, dr={self.debit}, cr={self.credit})>"
