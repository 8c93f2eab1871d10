"""
Database seeding script for the default chart of accounts.

Run this script after the database is set up but before first use.
Safe to run repeatedly: accounts whose code already exists are skipped.
"""

import asyncio

from backend.app.db.session import AsyncSessionLocal, engine, Base
from backend.app.domain.accounting.default_chart import seed_default_chart
from backend.app.services.audit import log_event, AuditAction

# Register every table with Base before create_all
import backend.app.main  # noqa: F401


async def seed_accounts():
    """
    Seed the default storefront chart of accounts.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting chart of accounts seeding...")

        created = await seed_default_chart(db)
        if not created:
            print("ℹ️  All default accounts already exist, skipping seeding")
            return

        await log_event(
            db=db,
            action=AuditAction.CHART_SEEDED,
            actor="seed_accounts",
            metadata={"codes": [a.code for a in created]},
            commit=False
        )
        await db.commit()

        print(f"\n🎉 Seeded {len(created)} accounts:")
        for account in created:
            print(f"  - {account.code}  {account.name} ({account.type.value})")


if __name__ == "__main__":
    asyncio.run(seed_accounts())
