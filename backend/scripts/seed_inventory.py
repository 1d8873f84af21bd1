import argparse
import asyncio
import sys
from pathlib import Path

"""
Seed inventory items through the same add path the API uses.

Entries are NAME[:QUANTITY[:CATEGORY]], e.g.
  uv run python scripts/seed_inventory.py apple:3:fruit banana:6:fruit "paper towels:2"
Seeding an existing name adds to its quantity.
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from core.inventory import InventoryService  # noqa: E402
from core.view_model import parse_quantity  # noqa: E402
from db.database import async_session_maker, create_db_and_tables  # noqa: E402
from db.document_store import DocumentStore  # noqa: E402

DEFAULT_ITEMS = ["apple:3:fruit", "banana:6:fruit", "rice:2:pantry"]


def parse_entry(entry: str):
    parts = entry.split(":")
    name = parts[0].strip()
    if not name:
        raise ValueError(f"entry without a name: {entry!r}")
    quantity = parse_quantity(parts[1]) if len(parts) > 1 else 1
    category = ":".join(parts[2:]).strip() if len(parts) > 2 else ""
    return name, quantity, category


async def seed(entries, dry_run: bool = False) -> int:
    parsed = [parse_entry(e) for e in entries]
    if dry_run:
        for name, quantity, category in parsed:
            print(f"[seed_inventory] DRY RUN: would add {quantity} x {name!r} ({category or 'Unknown'})")
        return 0

    await create_db_and_tables()
    added = 0
    async with async_session_maker() as session:
        service = InventoryService(DocumentStore(session))
        for name, quantity, category in parsed:
            result = await service.add_item(name, quantity, category)
            if not result.ok:
                print(f"[seed_inventory] failed to add {name!r}: {result.reason}")
                continue
            added += 1
    print(f"[seed_inventory] added {added}/{len(parsed)} entries")
    return added


def main():
    p = argparse.ArgumentParser()
    p.add_argument("entries", nargs="*", default=DEFAULT_ITEMS, help="NAME[:QUANTITY[:CATEGORY]]")
    p.add_argument("--dry-run", action="store_true", help="Do not write, just print what would be added")
    args = p.parse_args()

    asyncio.run(seed(args.entries, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
