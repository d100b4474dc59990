"""
MagicMenu tool server — Model Context Protocol over stdio.

Tools (names are part of the protocol surface, keep them stable):
  getRestaurantBySlug(slug)                  → restaurant row as JSON
  generateRestaurantQr(restaurant_id, slug)  → stores qr-codes/<id>/qr.png, updates qr_url
  checkDatabase()                            → which tables exist
  addSampleData()                            → 3 restaurants, 9 categories, 9 dishes

Every tool talks to the hosted backend and media storage directly; the local
record store is never involved. The plain coroutines below take their
collaborators as arguments; the @mcp.tool wrappers bind them to the
configured database and storage.

Run with:  magicmenu-mcp   (or python -m magicmenu.tools.mcp_server)
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from magicmenu.config import settings
from magicmenu.database import AsyncSessionLocal
from magicmenu.services.qr import build_menu_url, generate_qr_png
from magicmenu.services.resolver import normalize
from magicmenu.services.storage import MediaStorage, StorageError, build_storage
from magicmenu.store.hosted import BackendError, HostedBackend
from magicmenu.utils.demo_data import SAMPLE_CATEGORIES, SAMPLE_MENU_ITEMS, SAMPLE_RESTAURANTS

# stdout carries the protocol; logs go to stderr
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

CHECKED_TABLES = (
    ("restaurants", "Restaurants"),
    ("categories", "Categories"),
    ("menu_items", "Menu items"),
    ("reviews", "Reviews"),
    ("users", "Users"),
)

mcp = FastMCP("magicmenu-mcp")


# ── Tool bodies ──────────────────────────────────────────────────────────────


async def restaurant_by_slug(hosted: HostedBackend, slug: str) -> dict[str, Any]:
    rows = await hosted.select("restaurants", {"slug": slug}, limit=1)
    if not rows:
        raise ToolError(f"No restaurant with slug {slug!r}")
    return normalize("restaurants", rows[0])


async def store_restaurant_qr(
    hosted: HostedBackend,
    storage: MediaStorage,
    public_url: str,
    restaurant_id: str,
    slug: str,
) -> dict[str, str]:
    link = build_menu_url(public_url, slug)
    png = await generate_qr_png(link)
    qr_url = await storage.upload(f"{restaurant_id}/qr.png", png, "image/png")
    if await hosted.update("restaurants", restaurant_id, {"qr_url": qr_url}) is None:
        logger.warning("QR stored for unknown restaurant %s", restaurant_id)
    return {"qr_url": qr_url, "link": link}


async def database_report(hosted: HostedBackend) -> str:
    lines = []
    for collection, label in CHECKED_TABLES:
        try:
            exists = await hosted.table_exists(collection)
        except BackendError as exc:
            return f"Database check failed: {exc}"
        lines.append(f"{label} table: {'Exists' if exists else 'Missing'}")
    missing = any(line.endswith("Missing") for line in lines)
    if missing:
        lines.append("")
        lines.append("If tables are missing, run scripts/create_tables.py first.")
    return "\n".join(lines)


async def insert_sample_data(hosted: HostedBackend) -> dict[str, int]:
    return {
        "restaurants": await hosted.insert_many("restaurants", SAMPLE_RESTAURANTS),
        "categories": await hosted.insert_many("categories", SAMPLE_CATEGORIES),
        "menu_items": await hosted.insert_many("menu_items", SAMPLE_MENU_ITEMS),
    }


# ── MCP bindings ─────────────────────────────────────────────────────────────


def _hosted() -> HostedBackend:
    return HostedBackend(AsyncSessionLocal)


@mcp.tool(name="getRestaurantBySlug", description="Fetch public restaurant row by slug")
async def get_restaurant_by_slug(slug: str) -> str:
    try:
        restaurant = await restaurant_by_slug(_hosted(), slug)
    except BackendError as exc:
        raise ToolError(str(exc)) from exc
    return json.dumps(restaurant, indent=2)


@mcp.tool(
    name="generateRestaurantQr",
    description="Create a QR PNG for a restaurant and store it; returns public URL",
)
async def generate_restaurant_qr(restaurant_id: str, slug: str) -> str:
    try:
        storage = build_storage(settings, settings.qr_container)
        result = await store_restaurant_qr(
            _hosted(), storage, settings.app_public_url, restaurant_id, slug
        )
    except (BackendError, StorageError) as exc:
        raise ToolError(str(exc)) from exc
    return json.dumps(result, indent=2)


@mcp.tool(name="checkDatabase", description="Check if the MagicMenu database tables exist")
async def check_database() -> str:
    return await database_report(_hosted())


@mcp.tool(name="addSampleData", description="Add sample restaurant data for testing")
async def add_sample_data() -> str:
    try:
        counts = await insert_sample_data(_hosted())
    except BackendError as exc:
        raise ToolError(f"Sample data insert failed: {exc}") from exc
    names = ", ".join(r["name"] for r in SAMPLE_RESTAURANTS)
    return (
        "Successfully added sample data:\n"
        f"- {counts['restaurants']} restaurants ({names})\n"
        f"- {counts['categories']} categories\n"
        f"- {counts['menu_items']} menu items"
    )


def main() -> None:
    logger.info("MagicMenu MCP server starting on stdio")
    mcp.run()


if __name__ == "__main__":
    main()
