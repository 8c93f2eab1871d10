"""
Normal-side balance conventions.

Asset and expense accounts are debit-normal: debits increase them.
Liability, equity and revenue accounts are credit-normal: credits increase them.
Every stored or displayed balance in this service is expressed on the
account's normal side.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from backend.app.models.accounting_enums import AccountType

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

DEBIT_NORMAL_TYPES = frozenset({AccountType.ASSET, AccountType.EXPENSE})
CREDIT_NORMAL_TYPES = frozenset({AccountType.LIABILITY, AccountType.EQUITY, AccountType.REVENUE})


def to_money(value) -> Decimal:
    """Coerce a number (int, float, str, Decimal, None) to a 2dp Decimal."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def normal_sign(account_type: AccountType) -> int:
    """+1 for debit-normal accounts, -1 for credit-normal accounts."""
    return 1 if AccountType(account_type) in DEBIT_NORMAL_TYPES else -1


def balance_change(account_type: AccountType, debit, credit) -> Decimal:
    """Effect of one debit/credit pair on an account's normal-side balance."""
    return (to_money(debit) - to_money(credit)) * normal_sign(account_type)


def fold_balance(account_type: AccountType, movements: Iterable[Tuple]) -> Decimal:
    """Replay (debit, credit) pairs from zero into a normal-side balance."""
    total = ZERO
    for debit, credit in movements:
        total += balance_change(account_type, debit, credit)
    return total


def is_within_tolerance(left, right, tolerance) -> bool:
    return abs(to_money(left) - to_money(right)) <= Decimal(str(tolerance))


def trial_balance_columns(account_type: AccountType, balance) -> Tuple[Decimal, Decimal]:
    """
    Place a normal-side balance into (debit, credit) trial balance columns.

    A positive balance sits on the account's normal side; a negative one
    flips to the opposite column as its absolute value.
    """
    balance = to_money(balance)
    if balance == 0:
        return ZERO, ZERO
    debit_normal = AccountType(account_type) in DEBIT_NORMAL_TYPES
    if (balance > 0) == debit_normal:
        return abs(balance), ZERO
    return ZERO, abs(balance)
