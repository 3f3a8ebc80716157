"""Quick script to check database records."""

import asyncio

from sqlalchemy import select

from db import create_engine, create_session_factory
from models.company import Company
from models.user import User


async def check_db():
    engine = create_engine()
    session_factory = create_session_factory(engine)
    try:
        async with session_factory() as db:
            companies = (await db.execute(select(Company).order_by(Company.id))).scalars().all()
            users = (await db.execute(select(User).order_by(User.company_id, User.id))).scalars().all()
    finally:
        await engine.dispose()

    company_names = {company.id: company.name for company in companies}

    print("=" * 50)
    print("DATABASE RECORDS")
    print("=" * 50)

    print(f"\nCompanies: {len(companies)}")
    for c in companies:
        print(f"  - {c.name}")
        print(f"    UUID: {c.uuid}")
        print()

    print(f"Users: {len(users)}")
    for u in users:
        print(f"   * {u.email}")
        print(f"     Name: {u.name}")
        print(f"     Role: {u.role}")
        print(f"     Company: {company_names.get(u.company_id, '?')}")
        print()


if __name__ == "__main__":
    asyncio.run(check_db())
