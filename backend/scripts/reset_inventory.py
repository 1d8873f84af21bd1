"""
Delete ALL inventory records (image blobs are left alone).

Run inside docker (recommended):
  docker exec -i inventory-api sh -lc "cd /app && PYTHONPATH=/app uv run python scripts/reset_inventory.py"
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from core.config import INVENTORY_COLLECTION  # noqa: E402
from db.database import async_session_maker  # noqa: E402
from db.document_store import DocumentStore  # noqa: E402


async def reset(collection: str = INVENTORY_COLLECTION) -> int:
    async with async_session_maker() as db:
        return await DocumentStore(db).clear(collection)


async def main() -> None:
    deleted = await reset()
    print(f"Deleted inventory records: {deleted}")


if __name__ == "__main__":
    asyncio.run(main())
