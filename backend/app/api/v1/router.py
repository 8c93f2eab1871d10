"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import accounts, journal, ledger, reports

router = APIRouter()

# Chart of accounts
router.include_router(accounts.router)

# Journal entries and posting
router.include_router(journal.router)

# Ledger drill-down
router.include_router(ledger.router)

# Financial reports and reconciliation
router.include_router(reports.router)
