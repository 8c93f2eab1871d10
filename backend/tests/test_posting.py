"""
Integration tests for posting journal entries.

Tests balance movement, ledger writes, double-posting protection and
rollback of partially applied postings.
"""

from datetime import date
from unittest.mock import patch

import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError

from backend.app.core.exceptions import EntryAlreadyPostedError, PostingFailedError
from backend.app.domain.accounting.account_registry import AccountRegistry
from backend.app.domain.accounting.journal_engine import JournalEngine
from backend.app.domain.accounting.ledger_store import LedgerStore
from backend.app.domain.accounting.posting_processor import PostingProcessor
from backend.app.models.ledger_entry import LedgerEntry
from backend.app.services.audit import get_audit_trail, AuditAction


async def create_draft(client, chart, lines, on="2026-10-05", description="Cash sale"):
    response = await client.post("/v1/accounting/journal", json={
        "date": on,
        "description": description,
        "lines": [
            {"account_id": chart[code], "debit": dr, "credit": cr}
            for code, dr, cr in lines
        ],
    })
    assert response.status_code == 201
    return response.json()


async def balance_of(client, account_id):
    response = await client.get(f"/v1/accounting/accounts/{account_id}")
    return response.json()["balance"]


async def ledger_count(db_session):
    return (await db_session.execute(select(func.count(LedgerEntry.id)))).scalar()


# TEST 1: Cash sale
@pytest.mark.asyncio
async def test_post_cash_sale(client, chart):
    entry = await create_draft(client, chart, [("1000", 1000, 0), ("4000", 0, 1000)])

    response = await client.post(f"/v1/accounting/journal/{entry['id']}/post")

    assert response.status_code == 200
    data = response.json()
    assert data["is_posted"] is True
    assert data["posted_at"] is not None

    assert await balance_of(client, chart["1000"]) == 1000
    assert await balance_of(client, chart["4000"]) == 1000

    ledger = (await client.get("/v1/accounting/ledger")).json()["entries"]
    assert [(row["account_id"], row["debit"], row["credit"]) for row in ledger] == [
        (chart["1000"], 1000, 0),
        (chart["4000"], 0, 1000),
    ]
    assert all(row["journal_entry_id"] == entry["id"] for row in ledger)
    assert all(row["date"] == "2026-10-05" for row in ledger)

    trial = (await client.get(
        "/v1/accounting/reports/trial-balance", params={"as_of_date": "2026-10-31"}
    )).json()
    assert trial["is_balanced"] is True
    assert trial["total_debit"] == 1000
    assert trial["total_credit"] == 1000


@pytest.mark.asyncio
async def test_post_moves_balances_on_normal_side(client, chart):
    capital = await create_draft(client, chart, [("1010", 500, 0), ("3000", 0, 500)])
    await client.post(f"/v1/accounting/journal/{capital['id']}/post")

    # Pay rent from the bank: expense up, asset down
    rent = await create_draft(client, chart, [("5200", 200, 0), ("1010", 0, 200)])
    await client.post(f"/v1/accounting/journal/{rent['id']}/post")

    assert await balance_of(client, chart["1010"]) == 300
    assert await balance_of(client, chart["3000"]) == 500
    assert await balance_of(client, chart["5200"]) == 200


@pytest.mark.asyncio
async def test_ledger_snapshots_follow_account_balance(client, chart):
    for amount in (100, 50):
        entry = await create_draft(client, chart, [("1000", amount, 0), ("4000", 0, amount)])
        await client.post(f"/v1/accounting/journal/{entry['id']}/post")

    rows = (await client.get(
        "/v1/accounting/ledger", params={"account_id": chart["1000"]}
    )).json()["entries"]

    assert [row["balance"] for row in rows] == [100, 150]


# TEST 2: Double posting
@pytest.mark.asyncio
async def test_double_post_rejected(client, chart, db_session):
    entry = await create_draft(client, chart, [("1000", 1000, 0), ("4000", 0, 1000)])
    await client.post(f"/v1/accounting/journal/{entry['id']}/post")

    response = await client.post(f"/v1/accounting/journal/{entry['id']}/post")

    assert response.status_code == 409
    body = response.json()
    assert body["error_code"] == "ERR_JOURNAL_ALREADY_POSTED"
    assert body["message"] == "Entry already posted"
    assert await balance_of(client, chart["1000"]) == 1000
    assert await ledger_count(db_session) == 2


@pytest.mark.asyncio
async def test_post_unknown_entry_404(client, chart):
    response = await client.post("/v1/accounting/journal/9999/post")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stale_reader_cannot_post_again(client, chart, db_session):
    entry = await create_draft(client, chart, [("1000", 10, 0), ("4000", 0, 10)])

    # This session saw the entry as a draft before someone else posted it
    stale = await JournalEngine.get_entry(db_session, entry["id"])
    assert stale.is_posted is False
    await db_session.commit()

    await client.post(f"/v1/accounting/journal/{entry['id']}/post")

    with pytest.raises(EntryAlreadyPostedError):
        await PostingProcessor.post_entry(db_session, entry["id"])

    assert await balance_of(client, chart["1000"]) == 10
    assert await ledger_count(db_session) == 2


# TEST 3: Atomicity
@pytest.mark.asyncio
async def test_failed_posting_rolls_back_everything(db_session, chart, book):
    entry = await book([("1000", 300, 0), ("1010", 200, 0), ("4000", 0, 500)], post=False)
    entry_id = entry.id

    original = LedgerStore.append_entry
    calls = []

    async def fail_on_second_line(*args, **kwargs):
        calls.append(kwargs.get("account_id"))
        if len(calls) == 2:
            raise SQLAlchemyError("disk full")
        return await original(*args, **kwargs)

    with patch.object(LedgerStore, "append_entry", side_effect=fail_on_second_line):
        with pytest.raises(PostingFailedError):
            await PostingProcessor.post_entry(db_session, entry_id)

    # The rollback expired every instance in the session
    reloaded = await JournalEngine.get_entry(db_session, entry_id)
    assert reloaded.is_posted is False
    assert reloaded.posted_at is None
    for code in ("1000", "1010", "4000"):
        account = await AccountRegistry.get_account(db_session, chart[code])
        assert account.balance == 0
    assert await ledger_count(db_session) == 0

    # The entry can still be posted once the fault is gone
    posted = await PostingProcessor.post_entry(db_session, entry_id)
    assert posted.is_posted is True
    assert await ledger_count(db_session) == 3


@pytest.mark.asyncio
async def test_failed_posting_returns_500(client, chart):
    entry = await create_draft(client, chart, [("1000", 10, 0), ("4000", 0, 10)])

    with patch.object(LedgerStore, "append_entry", side_effect=SQLAlchemyError("boom")):
        response = await client.post(f"/v1/accounting/journal/{entry['id']}/post")

    assert response.status_code == 500
    assert response.json()["error_code"] == "ERR_POSTING_FAILED"
    assert (await client.get(f"/v1/accounting/journal/{entry['id']}")).json()["is_posted"] is False


# TEST 4: Audit
@pytest.mark.asyncio
async def test_posting_is_audited(client, chart, db_session):
    entry = await create_draft(client, chart, [("1000", 10, 0), ("4000", 0, 10)])
    await client.post(
        f"/v1/accounting/journal/{entry['id']}/post", headers={"X-Actor": "bookkeeper"}
    )

    trail = await get_audit_trail(
        db_session, entity_type="journal_entry", entity_id=entry["id"]
    )

    assert [log.action for log in trail][0] == AuditAction.JOURNAL_ENTRY_POSTED
    assert trail[0].actor == "bookkeeper"
    assert {log.action for log in trail} == {
        AuditAction.JOURNAL_ENTRY_CREATED, AuditAction.JOURNAL_ENTRY_POSTED
    }


@pytest.mark.asyncio
async def test_book_fixture_posts_on_date(client, book, chart):
    await book([("1000", 75, 0), ("4000", 0, 75)], on=date(2026, 3, 15))

    rows = (await client.get("/v1/accounting/ledger")).json()["entries"]
    assert {row["date"] for row in rows} == {"2026-03-15"}
