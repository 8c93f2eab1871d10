"""
Centralized Test Configuration.
"""

import os

# Point the application engine at SQLite before the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import date
from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from backend.app.main import app
from backend.app.db.session import get_db, Base
from backend.app.domain.accounting.default_chart import seed_default_chart
from backend.app.domain.accounting.journal_engine import JournalEngine
from backend.app.domain.accounting.posting_processor import PostingProcessor
from backend.app.schemas.journal import JournalEntryCreate

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(scope="session", autouse=True)
def apply_overrides():
    """Route every request's session to the in-memory test database."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
async def chart(db_session):
    """Default chart of accounts; returns {code: account_id}."""
    accounts = await seed_default_chart(db_session)
    await db_session.commit()
    return {account.code: account.id for account in accounts}


@pytest.fixture
def book(db_session, chart):
    """
    Create and post a journal entry through the domain layer.

    Usage: await book([("1000", 100, 0), ("4000", 0, 100)], on=date(...))
    """

    async def _book(lines, on=None, description="Test entry", post=True):
        data = JournalEntryCreate(
            date=on or date.today(),
            description=description,
            lines=[
                {"account_id": chart[code], "debit": Decimal(str(dr)), "credit": Decimal(str(cr))}
                for code, dr, cr in lines
            ],
        )
        entry = await JournalEngine.create_entry(db_session, data)
        await db_session.commit()
        if post:
            entry = await PostingProcessor.post_entry(db_session, entry.id)
        return entry

    return _book
