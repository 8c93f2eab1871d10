"""
Unit tests for balance arithmetic, entry numbering and ratio helpers.
"""

from datetime import date
from decimal import Decimal

import pytest

from backend.app.core.exceptions import UnbalancedEntryError, InvalidEntryError
from backend.app.domain.accounting.balances import (
    to_money, normal_sign, balance_change, fold_balance, is_within_tolerance, trial_balance_columns
)
from backend.app.domain.accounting.entry_numbers import period_key, format_entry_number
from backend.app.domain.accounting.journal_engine import validate_balanced
from backend.app.domain.accounting.report_generator import resolve_period, safe_ratio
from backend.app.models.accounting_enums import AccountType
from backend.app.schemas.journal import JournalLineCreate


def lines(*pairs):
    return [JournalLineCreate(account_id=i, debit=dr, credit=cr) for i, (dr, cr) in enumerate(pairs, start=1)]


@pytest.mark.parametrize("account_type,sign", [
    (AccountType.ASSET, 1),
    (AccountType.EXPENSE, 1),
    (AccountType.LIABILITY, -1),
    (AccountType.EQUITY, -1),
    (AccountType.REVENUE, -1),
])
def test_normal_sign(account_type, sign):
    assert normal_sign(account_type) == sign
    assert normal_sign(account_type.value) == sign


def test_balance_change():
    assert balance_change(AccountType.ASSET, 100, 0) == Decimal("100.00")
    assert balance_change(AccountType.ASSET, 0, 30) == Decimal("-30.00")
    assert balance_change(AccountType.REVENUE, 0, 100) == Decimal("100.00")
    assert balance_change(AccountType.LIABILITY, 25, 0) == Decimal("-25.00")


def test_fold_balance_replays_from_zero():
    movements = [(Decimal("100"), 0), (0, Decimal("30.50")), (Decimal("0.50"), 0)]
    assert fold_balance(AccountType.ASSET, movements) == Decimal("70.00")
    assert fold_balance(AccountType.EQUITY, movements) == Decimal("-70.00")
    assert fold_balance(AccountType.ASSET, []) == Decimal("0.00")


def test_to_money_rounds_half_up():
    assert to_money("1.005") == Decimal("1.01")
    assert to_money(None) == Decimal("0.00")
    assert to_money(2) == Decimal("2.00")


def test_tolerance_is_inclusive():
    assert is_within_tolerance(Decimal("100.01"), Decimal("100.00"), Decimal("0.01"))
    assert not is_within_tolerance(Decimal("100.02"), Decimal("100.00"), Decimal("0.01"))


@pytest.mark.parametrize("account_type,balance,expected", [
    (AccountType.ASSET, 50, (Decimal("50.00"), Decimal("0.00"))),
    (AccountType.ASSET, -50, (Decimal("0.00"), Decimal("50.00"))),
    (AccountType.REVENUE, 50, (Decimal("0.00"), Decimal("50.00"))),
    (AccountType.REVENUE, -50, (Decimal("50.00"), Decimal("0.00"))),
    (AccountType.EXPENSE, 0, (Decimal("0.00"), Decimal("0.00"))),
])
def test_trial_balance_columns(account_type, balance, expected):
    assert trial_balance_columns(account_type, balance) == expected


def test_validate_balanced_returns_totals():
    assert validate_balanced(lines((100, 0), (0, 60), (0, 40))) == (Decimal("100.00"), Decimal("100.00"))


def test_validate_balanced_rejects_mismatch():
    with pytest.raises(UnbalancedEntryError) as exc_info:
        validate_balanced(lines((100, 0), (0, 90)))
    assert exc_info.value.status_code == 400


def test_validate_balanced_rejects_zero_total():
    with pytest.raises(UnbalancedEntryError):
        validate_balanced(lines((0, 0), (0, 0)))


def test_entry_number_format():
    period = period_key(date(2026, 10, 19))
    assert period == "JE2610"
    assert format_entry_number(period, 7) == "JE26100007"
    assert format_entry_number(period_key(date(2030, 1, 5)), 1234) == "JE30011234"


def test_resolve_period_defaults():
    as_of, start, end = resolve_period(date(2026, 10, 19))
    assert (as_of, start, end) == (date(2026, 10, 19), date(2026, 1, 1), date(2026, 10, 19))

    _, start, end = resolve_period(date(2026, 10, 19), start_date=date(2026, 7, 1), end_date=date(2026, 9, 30))
    assert (start, end) == (date(2026, 7, 1), date(2026, 9, 30))


def test_safe_ratio():
    assert safe_ratio(Decimal("900"), Decimal("8900"), 100) == 10.1124
    assert safe_ratio(10, 0) == 0.0
    assert safe_ratio(10, Decimal("-5")) == 0.0
    assert safe_ratio(Decimal("-10"), 4) == -2.5


def test_validate_balanced_rejects_two_sided_line():
    with pytest.raises(InvalidEntryError) as exc_info:
        validate_balanced(lines((100, 0), (50, 150)))
    assert exc_info.value.details == {"line_number": 2}
