"""
Journal entry numbering.

Numbers look like ``JE`` + YY + MM + a zero-padded counter (``JE26100001``).
The counter is a persisted sequence per YYMM period, incremented with an
atomic UPDATE so concurrent requests never receive the same number.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import settings
from backend.app.models.sequence_counter import SequenceCounter

logger = logging.getLogger("storefront.accounting.sequence")

COUNTER_WIDTH = 4


async def next_sequence_value(db: AsyncSession, name: str) -> int:
    """
    Allocate the next value of a named sequence.

    Does not commit; the value is consumed only when the caller commits.
    """
    result = await db.execute(
        update(SequenceCounter)
        .where(SequenceCounter.name == name)
        .values(current_value=SequenceCounter.current_value + 1)
        .returning(SequenceCounter.current_value)
    )
    value = result.scalar_one_or_none()
    if value is not None:
        logger.debug("sequence_allocated", extra={"sequence_name": name, "value": value})
        return value

    # First use of this sequence. Another request may create it concurrently,
    # so the insert runs in a savepoint and falls back to the increment.
    try:
        async with db.begin_nested():
            db.add(SequenceCounter(name=name, current_value=1))
        logger.debug("sequence_allocated", extra={"sequence_name": name, "value": 1})
        return 1
    except IntegrityError:
        logger.debug("sequence_counter_race_retry", extra={"sequence_name": name})
        result = await db.execute(
            update(SequenceCounter)
            .where(SequenceCounter.name == name)
            .values(current_value=SequenceCounter.current_value + 1)
            .returning(SequenceCounter.current_value)
        )
        return result.scalar_one()


def period_key(on: date, prefix: Optional[str] = None) -> str:
    """``JE2610`` for October 2026."""
    prefix = settings.entry_number_prefix if prefix is None else prefix
    return f"{prefix}{on.year % 100:02d}{on.month:02d}"


def format_entry_number(period: str, value: int) -> str:
    return f"{period}{value:0{COUNTER_WIDTH}d}"


async def generate_entry_number(db: AsyncSession, on: Optional[date] = None) -> str:
    """Next journal entry number for the period containing `on` (default: today)."""
    period = period_key(on or date.today())
    value = await next_sequence_value(db, period)
    return format_entry_number(period, value)
