"""
Accounting enumerations.
"""

import enum


class AccountType(str, enum.Enum):
    """Account classification in the chart of accounts."""
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


class AccountRole(str, enum.Enum):
    """
    Well-known roles an account can play in report calculations.

    Replaces lookups by fixed account codes.
    """
    CASH = "cash"
    BANK = "bank"
    RECEIVABLES = "receivables"
    INVENTORY = "inventory"
    PREPAID = "prepaid"
    COGS = "cogs"
