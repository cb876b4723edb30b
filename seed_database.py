import asyncio
import random
import sys

from letter_tracker.services.database_service import database_service
from letter_tracker.services.seed_service import seed_database

# Optional RNG seed for reproducible demo data: python seed_database.py 42
RNG_SEED = int(sys.argv[1]) if len(sys.argv) > 1 else None


async def main():
    print("🌱 Starting database seed...\n")

    #  Recreate tables (existing demo data is dropped)
    await database_service.drop_tables()
    await database_service.create_tables()
    print(" Tables recreated\n")

    try:
        async with database_service.session() as session:
            summary = await seed_database(session, rng=random.Random(RNG_SEED))
    finally:
        await database_service.close()

    print("\n📊 Summary:")
    print(f"   Letter Types: {summary.letter_count}")
    print(f"   Unique Accounts: {summary.unique_accounts}")
    print(f"   Total Account Letters: {summary.account_letter_count}")
    print(f"   Tracking Events: {summary.tracking_event_count}")

    print("\n📬 Status Distribution:")
    for status, count in summary.status_counts.items():
        print(f"   {status}: {count}")

    print("\n📈 Scenario Breakdown:")
    for name, count in summary.scenario_counts.items():
        print(f"   {name}: {count} accounts")


if __name__ == "__main__":
    asyncio.run(main())
