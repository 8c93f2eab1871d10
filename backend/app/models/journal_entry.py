"""
Journal Entry database models.

A journal entry is a balanced set of debit/credit lines. It is created as a
draft and becomes immutable once posted.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from backend.app.db.session import Base


class JournalEntry(Base):
    """
    Journal Entry model.

    Lifecycle: DRAFT (is_posted=False) -> POSTED (is_posted=True), terminal.
    """
    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    entry_number = Column(String(20), unique=True, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    description = Column(String(500), nullable=False)

    # Totals
    total_debit = Column(Numeric(18, 2), nullable=False)
    total_credit = Column(Numeric(18, 2), nullable=False)

    # Status
    is_posted = Column(Boolean, default=False, nullable=False, index=True)
    posted_at = Column(DateTime(timezone=True), nullable=True)

    created_by = Column(String(100), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    lines = relationship(
        "JournalLine",
        back_populates="journal_entry",
        order_by="JournalLine.line_number",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<JournalEntry(id={self.id}, number='{self.entry_number}', posted={self.is_posted})>"


class JournalLine(Base):
    """One debit or credit line of a journal entry."""
    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    journal_entry_id = Column(Integer, ForeignKey('journal_entries.id', ondelete="CASCADE"), nullable=False, index=True)
    line_number = Column(Integer, nullable=False)

    account_id = Column(Integer, ForeignKey('accounts.id'), nullable=False, index=True)
    debit = Column(Numeric(18, 2), nullable=False, default=0)
    credit = Column(Numeric(18, 2), nullable=False, default=0)
    narration = Column(String(255), nullable=True)

    journal_entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("Account", lazy="selectin")

    @property
    def account_code(self):
        return self.account.code if self.account is not None else None

    @property
    def account_name(self):
        return self.account.name if self.account is not None else None

    def __repr__(self):
        return f"<JournalLine(entry={self.journal_entry_id}, account={self.account_id}, dr={self.debit}, cr={self.credit})>"
