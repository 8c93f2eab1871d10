"""
Journal API Endpoints.

Draft entry management and posting.
"""

from datetime import date
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from backend.app.db.session import get_db
from backend.app.core.dependencies import get_actor, PageParams
from backend.app.schemas.common import Pagination
from backend.app.schemas.journal import (
    JournalEntryCreate, JournalEntryUpdate, JournalEntryResponse, JournalEntryListResponse
)
from backend.app.domain.accounting.journal_engine import JournalEngine
from backend.app.domain.accounting.posting_processor import PostingProcessor
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/accounting/journal", tags=["Accounting - Journal"])


@router.get("", response_model=JournalEntryListResponse)
async def list_journal_entries(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    is_posted: Optional[bool] = Query(None),
    paging: PageParams = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """
    List journal entries, newest first.
    """
    entries, total = await JournalEngine.list_entries(
        db,
        start_date=start_date,
        end_date=end_date,
        is_posted=is_posted,
        page=paging.page,
        limit=paging.limit,
    )
    return JournalEntryListResponse(
        entries=[JournalEntryResponse.model_validate(e) for e in entries],
        pagination=Pagination.build(paging.page, paging.limit, total),
    )


@router.get("/{entry_id}", response_model=JournalEntryResponse)
async def get_journal_entry(entry_id: int, db: AsyncSession = Depends(get_db)):
    """Get a single journal entry with its lines."""
    return await JournalEngine.get_entry(db, entry_id)


@router.post("", response_model=JournalEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_journal_entry(
    data: JournalEntryCreate,
    actor: Optional[str] = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a draft journal entry.

    Returns 400 if debits and credits differ by more than 0.01.
    """
    if data.created_by is None and actor is not None:
        data = data.model_copy(update={"created_by": actor})

    entry = await JournalEngine.create_entry(db, data)

    await log_event(
        db=db,
        action=AuditAction.JOURNAL_ENTRY_CREATED,
        actor=data.created_by,
        entity_type="journal_entry",
        entity_id=entry.id,
        metadata={"entry_number": entry.entry_number, "total": str(entry.total_debit)},
        commit=False
    )
    await db.commit()

    return await JournalEngine.get_entry(db, entry.id)


@router.put("/{entry_id}", response_model=JournalEntryResponse)
async def update_journal_entry(
    entry_id: int,
    data: JournalEntryUpdate,
    actor: Optional[str] = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    """
    Edit a draft journal entry.

    Returns 404 if the entry does not exist or is already posted.
    """
    entry = await JournalEngine.update_entry(db, entry_id, data)

    await log_event(
        db=db,
        action=AuditAction.JOURNAL_ENTRY_UPDATED,
        actor=actor,
        entity_type="journal_entry",
        entity_id=entry.id,
        metadata={"fields": sorted(data.model_fields_set)},
        commit=False
    )
    await db.commit()

    return await JournalEngine.get_entry(db, entry_id)


@router.post("/{entry_id}/post", response_model=JournalEntryResponse)
async def post_journal_entry(
    entry_id: int = Path(..., description="Journal entry ID"),
    actor: Optional[str] = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    """
    Post a draft entry: move account balances and write ledger rows.

    Returns 409 if the entry was already posted.
    """
    entry = await PostingProcessor.post_entry(db, entry_id)

    await log_event(
        db=db,
        action=AuditAction.JOURNAL_ENTRY_POSTED,
        actor=actor,
        entity_type="journal_entry",
        entity_id=entry.id,
        metadata={"entry_number": entry.entry_number}
    )

    return entry
