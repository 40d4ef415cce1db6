import asyncio
import sys
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from sqlalchemy import insert, select  # noqa: E402

from campstay.api.deps import engine  # noqa: E402
from campstay.config import get_settings  # noqa: E402
from campstay.infrastructure.db.tables import metadata, resources  # noqa: E402

DEMO_RESOURCES = [
    {"id": 1, "owner_id": 100, "nightly_price": "50.00"},
    {"id": 2, "owner_id": 100, "nightly_price": "35.00"},
    {"id": 3, "owner_id": 200, "nightly_price": "80.00"},
]


def demo_rows(existing_ids: set[int], currency: str) -> list[dict]:
    """Demo resources not seeded yet, priced in `currency`."""
    return [
        {**resource, "currency": currency.lower()}
        for resource in DEMO_RESOURCES
        if resource["id"] not in existing_ids
    ]


async def seed():
    settings = get_settings()
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        print("Created missing tables.")

        existing = set((await conn.execute(select(resources.c.id))).scalars().all())
        rows = demo_rows(existing, settings.default_currency)
        if rows:
            await conn.execute(insert(resources), rows)
        print(f"Seeded {len(rows)} resources in {settings.default_currency}.")

if __name__ == "__main__":
    asyncio.run(seed())
