"""
Integration tests for the ledger view.

Tests ordering, range filters, running balances and pagination carry-forward.
"""

from datetime import date

import pytest


@pytest.fixture
async def history(book):
    """Three postings booked out of date order."""
    await book([("1000", 50, 0), ("4000", 0, 50)], on=date(2026, 3, 3), description="March sale")
    await book([("1000", 100, 0), ("4000", 0, 100)], on=date(2026, 1, 1), description="January sale")
    await book([("5300", 30, 0), ("1000", 0, 30)], on=date(2026, 2, 2), description="Power bill")


# TEST 1: Ordering
@pytest.mark.asyncio
async def test_ledger_is_chronological(client, chart, history):
    response = await client.get("/v1/accounting/ledger", params={"account_id": chart["1000"]})

    assert response.status_code == 200
    data = response.json()
    assert [row["date"] for row in data["entries"]] == ["2026-01-01", "2026-02-02", "2026-03-03"]
    assert [row["description"] for row in data["entries"]] == [
        "January sale", "Power bill", "March sale"
    ]
    assert data["account"]["code"] == "1000"
    assert data["pagination"]["total"] == 3


@pytest.mark.asyncio
async def test_unfiltered_ledger_has_no_running_balance(client, chart, history):
    data = (await client.get("/v1/accounting/ledger")).json()

    assert data["pagination"]["total"] == 6
    assert data["account"] is None
    assert data["opening_balance"] is None
    assert all(row["running_balance"] is None for row in data["entries"])


# TEST 2: Running balance
@pytest.mark.asyncio
async def test_running_balance_on_normal_side(client, chart, history):
    cash = (await client.get(
        "/v1/accounting/ledger", params={"account_id": chart["1000"]}
    )).json()["entries"]
    revenue = (await client.get(
        "/v1/accounting/ledger", params={"account_id": chart["4000"]}
    )).json()["entries"]

    assert [row["running_balance"] for row in cash] == [100, 70, 120]
    assert [row["running_balance"] for row in revenue] == [100, 150]


@pytest.mark.asyncio
async def test_snapshot_reflects_posting_order(client, chart, history):
    rows = (await client.get(
        "/v1/accounting/ledger", params={"account_id": chart["1000"]}
    )).json()["entries"]

    # Snapshots were taken as postings happened: March, then January, then February
    assert [row["balance"] for row in rows] == [150, 120, 50]
    assert rows[-1]["running_balance"] == 120


@pytest.mark.asyncio
async def test_running_balance_starts_at_range_start(client, chart, history):
    data = (await client.get("/v1/accounting/ledger", params={
        "account_id": chart["1000"], "start_date": "2026-02-01", "end_date": "2026-12-31"
    })).json()

    assert data["opening_balance"] == 0
    assert [row["running_balance"] for row in data["entries"]] == [-30, 20]


@pytest.mark.asyncio
async def test_end_date_filter(client, chart, history):
    data = (await client.get("/v1/accounting/ledger", params={
        "account_id": chart["1000"], "end_date": "2026-02-28"
    })).json()

    assert [row["date"] for row in data["entries"]] == ["2026-01-01", "2026-02-02"]


# TEST 3: Pagination
@pytest.mark.asyncio
async def test_later_pages_carry_forward(client, chart, history):
    data = (await client.get("/v1/accounting/ledger", params={
        "account_id": chart["1000"], "page": 2, "limit": 2
    })).json()

    assert data["opening_balance"] == 70
    assert [row["running_balance"] for row in data["entries"]] == [120]
    assert data["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}


@pytest.mark.asyncio
async def test_unknown_account_404(client, chart):
    response = await client.get("/v1/accounting/ledger", params={"account_id": 9999})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_limit_is_clamped(client, chart):
    response = await client.get("/v1/accounting/ledger", params={"limit": 10_000})

    assert response.status_code == 200
    assert response.json()["pagination"]["limit"] == 200
