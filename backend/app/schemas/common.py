"""
Shared schema building blocks.
"""

from decimal import Decimal
from typing import Annotated
from pydantic import BaseModel, PlainSerializer

# Amounts are Decimal internally and plain JSON numbers on the wire.
Money = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]


class Pagination(BaseModel):
    """Pagination block returned with list responses."""
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=(total + limit - 1) // limit if limit else 0)
