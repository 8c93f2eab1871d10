"""
Report Generator (Domain Logic).

Produces trial balance, balance sheet, profit & loss, financial ratios and
the balance reconciliation from the ledger.

RULES:
- READ-ONLY (never writes)
- Only active accounts appear in reports
- Balances are replayed from ledger rows up to the requested date, so
  reports for past dates are date-correct
"""

from datetime import date
from decimal import Decimal
from typing import Optional, List, Iterable
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from backend.app.core.config import settings
from backend.app.models.account import Account
from backend.app.models.accounting_enums import AccountType, AccountRole
from backend.app.domain.accounting.balances import (
    ZERO, to_money, normal_sign, is_within_tolerance, trial_balance_columns
)
from backend.app.domain.accounting.ledger_store import LedgerStore, Movements
from backend.app.schemas.reports import (
    TrialBalanceLine, TrialBalanceReport,
    BalanceSheetItem, BalanceSheetSection, BalanceSheetReport,
    ProfitLossItem, ProfitLossSection, ProfitLossReport,
    LiquidityRatios, ProfitabilityRatios, LeverageRatios, EfficiencyRatios,
    FinancialRatiosReport, ReconciliationLine, ReconciliationReport,
)

CURRENT_SUBTYPE = "current"

CURRENT_ASSET_ROLES = (
    AccountRole.CASH, AccountRole.BANK, AccountRole.RECEIVABLES,
    AccountRole.INVENTORY, AccountRole.PREPAID,
)


def resolve_period(
    as_of_date: Optional[date] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> tuple:
    """
    Fill in report dates.

    as_of_date defaults to today, start_date to 1 January of the as_of_date
    year, end_date to as_of_date.
    """
    as_of = as_of_date or date.today()
    start = start_date or date(as_of.year, 1, 1)
    end = end_date or as_of
    return as_of, start, end


def safe_ratio(numerator, denominator, scale: int = 1) -> float:
    """numerator / denominator, or 0 when the denominator is not positive."""
    denominator = Decimal(denominator)
    if denominator <= 0:
        return 0.0
    return round(float(Decimal(numerator) / denominator * scale), 4)


def _net(account: Account, movements: Movements) -> Decimal:
    debit, credit = movements.get(account.id, (ZERO, ZERO))
    return (debit - credit) * normal_sign(account.type)


def _of_type(accounts: Iterable[Account], account_type: AccountType) -> List[Account]:
    return [a for a in accounts if a.type == account_type]


def _total(accounts: Iterable[Account], movements: Movements, absolute: bool = False) -> Decimal:
    values = (_net(a, movements) for a in accounts)
    return sum((abs(v) if absolute else v for v in values), ZERO)


def _role_total(accounts: Iterable[Account], movements: Movements, role: AccountRole) -> Decimal:
    return _total((a for a in accounts if a.role == role), movements)


class ReportGenerator:

    @staticmethod
    async def _active_accounts(db: AsyncSession) -> List[Account]:
        result = await db.execute(
            select(Account)
            .where(Account.is_active.is_(True))
            .order_by(Account.code)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    @staticmethod
    async def trial_balance(db: AsyncSession, as_of_date: Optional[date] = None) -> TrialBalanceReport:
        as_of, _, _ = resolve_period(as_of_date)
        accounts = await ReportGenerator._active_accounts(db)
        movements = await LedgerStore.balances_as_of(db, as_of)

        lines = []
        for account in accounts:
            debit, credit = trial_balance_columns(account.type, _net(account, movements))
            lines.append(TrialBalanceLine(
                account_id=account.id,
                account_code=account.code,
                account_name=account.name,
                account_type=account.type,
                debit=debit,
                credit=credit,
            ))

        total_debit = sum((line.debit for line in lines), ZERO)
        total_credit = sum((line.credit for line in lines), ZERO)
        return TrialBalanceReport(
            as_of_date=as_of,
            accounts=lines,
            total_debit=total_debit,
            total_credit=total_credit,
            is_balanced=is_within_tolerance(total_debit, total_credit, settings.balance_tolerance),
        )

    @staticmethod
    async def balance_sheet(db: AsyncSession, as_of_date: Optional[date] = None) -> BalanceSheetReport:
        """
        Assets, liabilities and equity as of a date.

        Assets = Liabilities + Equity is reported through is_balanced, not
        enforced. Revenue and expense accounts are not closed into equity
        here, so the identity only holds once the period has been closed.
        """
        as_of, _, _ = resolve_period(as_of_date)
        accounts = await ReportGenerator._active_accounts(db)
        movements = await LedgerStore.balances_as_of(db, as_of)

        def section(account_type: AccountType) -> BalanceSheetSection:
            members = _of_type(accounts, account_type)
            return BalanceSheetSection(
                items=[
                    BalanceSheetItem(
                        account_id=a.id,
                        account_code=a.code,
                        account_name=a.name,
                        balance=_net(a, movements),
                    )
                    for a in members
                ],
                total=_total(members, movements),
            )

        assets = section(AccountType.ASSET)
        liabilities = section(AccountType.LIABILITY)
        equity = section(AccountType.EQUITY)
        return BalanceSheetReport(
            as_of_date=as_of,
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            total_assets=assets.total,
            total_liabilities=liabilities.total,
            total_equity=equity.total,
            is_balanced=is_within_tolerance(
                assets.total, liabilities.total + equity.total, settings.balance_tolerance
            ),
        )

    @staticmethod
    async def profit_loss(
        db: AsyncSession,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ProfitLossReport:
        """Revenue and expense activity between two dates (inclusive)."""
        _, start, end = resolve_period(end_date, start_date, end_date)
        accounts = await ReportGenerator._active_accounts(db)
        activity = await LedgerStore.activity_between(db, start, end)

        def section(account_type: AccountType) -> ProfitLossSection:
            members = _of_type(accounts, account_type)
            return ProfitLossSection(
                items=[
                    ProfitLossItem(
                        account_id=a.id,
                        account_code=a.code,
                        account_name=a.name,
                        amount=abs(_net(a, activity)),
                    )
                    for a in members
                ],
                total=_total(members, activity, absolute=True),
            )

        revenue = section(AccountType.REVENUE)
        expenses = section(AccountType.EXPENSE)
        cogs = _role_total(accounts, activity, AccountRole.COGS)
        return ProfitLossReport(
            start_date=start,
            end_date=end,
            revenue=revenue,
            expenses=expenses,
            total_revenue=revenue.total,
            total_expenses=expenses.total,
            cost_of_goods_sold=cogs,
            gross_profit=revenue.total - cogs,
            net_profit=revenue.total - expenses.total,
        )

    @staticmethod
    async def financial_ratios(
        db: AsyncSession,
        as_of_date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> FinancialRatiosReport:
        """
        Liquidity, profitability, leverage and efficiency ratios.

        Balance figures are taken at end_date; revenue, expenses and cost
        of goods sold are activity between start_date and end_date. Any ratio
        whose denominator is not positive is 0.
        """
        as_of, start, end = resolve_period(as_of_date, start_date, end_date)
        accounts = await ReportGenerator._active_accounts(db)
        balances = await LedgerStore.balances_as_of(db, end)
        activity = await LedgerStore.activity_between(db, start, end)

        cash = _role_total(accounts, balances, AccountRole.CASH)
        bank = _role_total(accounts, balances, AccountRole.BANK)
        receivables = _role_total(accounts, balances, AccountRole.RECEIVABLES)
        inventory = _role_total(accounts, balances, AccountRole.INVENTORY)
        current_assets = sum(
            (_role_total(accounts, balances, role) for role in CURRENT_ASSET_ROLES), ZERO
        )
        current_liabilities = _total(
            (a for a in _of_type(accounts, AccountType.LIABILITY) if a.subtype == CURRENT_SUBTYPE),
            balances,
        )

        total_assets = _total(_of_type(accounts, AccountType.ASSET), balances)
        total_liabilities = _total(_of_type(accounts, AccountType.LIABILITY), balances)
        total_equity = _total(_of_type(accounts, AccountType.EQUITY), balances)

        revenue = _total(_of_type(accounts, AccountType.REVENUE), activity, absolute=True)
        expenses = _total(_of_type(accounts, AccountType.EXPENSE), activity, absolute=True)
        cogs = _role_total(accounts, activity, AccountRole.COGS)
        net_profit = revenue - expenses
        gross_profit = revenue - cogs

        return FinancialRatiosReport(
            as_of_date=as_of,
            start_date=start,
            end_date=end,
            liquidity_ratios=LiquidityRatios(
                current_ratio=safe_ratio(current_assets, current_liabilities),
                quick_ratio=safe_ratio(current_assets - inventory, current_liabilities),
                cash_ratio=safe_ratio(cash + bank, current_liabilities),
            ),
            profitability_ratios=ProfitabilityRatios(
                gross_profit_margin=safe_ratio(gross_profit, revenue, 100),
                net_profit_margin=safe_ratio(net_profit, revenue, 100),
                return_on_assets=safe_ratio(net_profit, total_assets, 100),
                return_on_equity=safe_ratio(net_profit, total_equity, 100),
            ),
            leverage_ratios=LeverageRatios(
                debt_to_equity=safe_ratio(total_liabilities, total_equity),
                debt_ratio=safe_ratio(total_liabilities, total_assets),
                equity_ratio=safe_ratio(total_equity, total_assets),
            ),
            efficiency_ratios=EfficiencyRatios(
                inventory_turnover=safe_ratio(cogs, inventory),
                receivables_turnover=safe_ratio(revenue, receivables),
                asset_turnover=safe_ratio(revenue, total_assets),
            ),
        )

    @staticmethod
    async def reconciliation(db: AsyncSession) -> ReconciliationReport:
        """
        Compare every account's stored balance with a replay of its ledger.

        Covers inactive accounts too; a non-zero difference means the cached
        balance drifted from the ledger and needs investigation.
        """
        result = await db.execute(
            select(Account).order_by(Account.code).execution_options(populate_existing=True)
        )
        accounts = list(result.scalars().all())
        movements = await LedgerStore.movements(db)

        lines = []
        for account in accounts:
            stored = to_money(account.balance)
            replayed = _net(account, movements)
            lines.append(ReconciliationLine(
                account_id=account.id,
                account_code=account.code,
                stored_balance=stored,
                ledger_balance=replayed,
                difference=stored - replayed,
            ))

        discrepancies = [line for line in lines if line.difference != 0]
        return ReconciliationReport(
            accounts=lines,
            discrepancies=discrepancies,
            is_consistent=not discrepancies,
        )
