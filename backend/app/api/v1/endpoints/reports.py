"""
Financial Reports API Endpoints.

All reports are computed on request from the ledger; nothing is cached.
"""

from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from backend.app.db.session import get_db
from backend.app.schemas.reports import (
    TrialBalanceReport, BalanceSheetReport, ProfitLossReport,
    FinancialRatiosReport, ReconciliationReport
)
from backend.app.domain.accounting.report_generator import ReportGenerator

router = APIRouter(prefix="/accounting", tags=["Accounting - Reports"])


@router.get("/reports/trial-balance", response_model=TrialBalanceReport)
async def get_trial_balance(
    as_of_date: Optional[date] = Query(None, description="Defaults to today"),
    db: AsyncSession = Depends(get_db)
):
    return await ReportGenerator.trial_balance(db, as_of_date)


@router.get("/reports/balance-sheet", response_model=BalanceSheetReport)
async def get_balance_sheet(
    as_of_date: Optional[date] = Query(None, description="Defaults to today"),
    db: AsyncSession = Depends(get_db)
):
    return await ReportGenerator.balance_sheet(db, as_of_date)


@router.get("/reports/profit-loss", response_model=ProfitLossReport)
async def get_profit_loss(
    start_date: Optional[date] = Query(None, description="Defaults to 1 January"),
    end_date: Optional[date] = Query(None, description="Defaults to today"),
    db: AsyncSession = Depends(get_db)
):
    return await ReportGenerator.profit_loss(db, start_date, end_date)


@router.get("/reports/ratios", response_model=FinancialRatiosReport)
async def get_financial_ratios(
    as_of_date: Optional[date] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """
    Liquidity, profitability, leverage and efficiency ratios.

    Ratios with a zero denominator are reported as 0.
    """
    return await ReportGenerator.financial_ratios(db, as_of_date, start_date, end_date)


@router.get("/reconciliation", response_model=ReconciliationReport)
async def get_reconciliation(db: AsyncSession = Depends(get_db)):
    """
    Check stored account balances against a replay of the ledger.
    """
    return await ReportGenerator.reconciliation(db)
