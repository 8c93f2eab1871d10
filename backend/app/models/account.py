"""
Account database model.

One row per account in the chart of accounts.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, ForeignKey, Numeric
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.accounting_enums import AccountType, AccountRole


class Account(Base):
    """
    Account model.

    `balance` is kept on the account's normal side (debit-normal for
    assets/expenses, credit-normal for liabilities/equity/revenue) and is
    only ever changed by the posting processor. Accounts are never deleted,
    only deactivated.
    """
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Business key
    code = Column(String(20), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)

    # Classification
    type = Column(Enum(AccountType), nullable=False, index=True)
    subtype = Column(String(50), nullable=False, default="")
    role = Column(Enum(AccountRole), nullable=True, index=True)
    parent_id = Column(Integer, ForeignKey('accounts.id'), nullable=True)

    # Financials
    balance = Column(Numeric(18, 2), nullable=False, default=0)

    # Status (soft delete)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Account(id={self.id}, code='{self.code}', type='{self.type.value}', balance={self.balance})>"
