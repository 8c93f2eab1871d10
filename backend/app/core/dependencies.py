"""
Shared FastAPI dependencies.

Authentication is handled upstream of this service; callers identify
themselves for the audit trail with the X-Actor header.
"""

from typing import Optional
from fastapi import Header, Query
from backend.app.core.config import settings


async def get_actor(x_actor: Optional[str] = Header(None, max_length=100)) -> Optional[str]:
    """Name of the user or system acting, as supplied by the caller."""
    return x_actor


class PageParams:
    """Page / limit query parameters bounded by settings."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        limit: Optional[int] = Query(None, ge=1, description="Items per page"),
    ):
        self.page = page
        self.limit = min(limit or settings.default_page_size, settings.max_page_size)
