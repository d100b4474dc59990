"""
create_tables.py — idempotent table creation script.
Run this before starting the API against a fresh database, or after schema
changes. Safe to run multiple times (create_all skips existing tables).

Usage:
    python scripts/create_tables.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Ensure the project root is on the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from magicmenu.database import engine
from magicmenu.models import Base


async def main() -> None:
    """Create restaurants, categories, menu_items, reviews and users."""
    print("Creating tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("  ✓ All tables created: " + ", ".join(sorted(Base.metadata.tables)))

    print("\nDone. Start the API with `uvicorn magicmenu.main:app`.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
