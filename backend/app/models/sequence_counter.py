"""
Sequence Counter database model.

Named monotonic counters used for human-readable document numbers.
"""

from sqlalchemy import Column, Integer, String, BigInteger
from backend.app.db.session import Base


class SequenceCounter(Base):
    """One row per named sequence (e.g. one per journal numbering period)."""
    __tablename__ = "sequence_counters"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False)
    current_value = Column(BigInteger, nullable=False, default=0)

    def __repr__(self):
        return f"<SequenceCounter(name='{self.name}', value={self.current_value})>"
