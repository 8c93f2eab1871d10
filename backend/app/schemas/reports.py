"""
Financial report schemas.

Reports are derived on request and never persisted.
"""

import datetime as dt
from pydantic import BaseModel
from typing import List
from backend.app.models.accounting_enums import AccountType
from backend.app.schemas.common import Money


class TrialBalanceLine(BaseModel):
    account_id: int
    account_code: str
    account_name: str
    account_type: AccountType
    debit: Money
    credit: Money


class TrialBalanceReport(BaseModel):
    as_of_date: dt.date
    accounts: List[TrialBalanceLine]
    total_debit: Money
    total_credit: Money
    is_balanced: bool


class BalanceSheetItem(BaseModel):
    account_id: int
    account_code: str
    account_name: str
    balance: Money


class BalanceSheetSection(BaseModel):
    items: List[BalanceSheetItem]
    total: Money


class BalanceSheetReport(BaseModel):
    as_of_date: dt.date
    assets: BalanceSheetSection
    liabilities: BalanceSheetSection
    equity: BalanceSheetSection
    total_assets: Money
    total_liabilities: Money
    total_equity: Money
    is_balanced: bool


class ProfitLossItem(BaseModel):
    account_id: int
    account_code: str
    account_name: str
    amount: Money


class ProfitLossSection(BaseModel):
    items: List[ProfitLossItem]
    total: Money


class ProfitLossReport(BaseModel):
    start_date: dt.date
    end_date: dt.date
    revenue: ProfitLossSection
    expenses: ProfitLossSection
    total_revenue: Money
    total_expenses: Money
    cost_of_goods_sold: Money
    gross_profit: Money
    net_profit: Money


class LiquidityRatios(BaseModel):
    current_ratio: float
    quick_ratio: float
    cash_ratio: float


class ProfitabilityRatios(BaseModel):
    """Margins and returns, in percent."""
    gross_profit_margin: float
    net_profit_margin: float
    return_on_assets: float
    return_on_equity: float


class LeverageRatios(BaseModel):
    debt_to_equity: float
    debt_ratio: float
    equity_ratio: float


class EfficiencyRatios(BaseModel):
    inventory_turnover: float
    receivables_turnover: float
    asset_turnover: float


class FinancialRatiosReport(BaseModel):
    as_of_date: dt.date
    start_date: dt.date
    end_date: dt.date
    liquidity_ratios: LiquidityRatios
    profitability_ratios: ProfitabilityRatios
    leverage_ratios: LeverageRatios
    efficiency_ratios: EfficiencyRatios


class ReconciliationLine(BaseModel):
    account_id: int
    account_code: str
    stored_balance: Money
    ledger_balance: Money
    difference: Money


class ReconciliationReport(BaseModel):
    """Stored account balances checked against a replay of the ledger."""
    accounts: List[ReconciliationLine]
    discrepancies: List[ReconciliationLine]
    is_consistent: bool
