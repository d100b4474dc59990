"""Tool server bodies, run against a real SQLite hosted backend."""

from __future__ import annotations

import json

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from magicmenu.services.storage import LocalMediaStorage
from magicmenu.store.hosted import BackendError
from magicmenu.tools import mcp_server
from magicmenu.tools.mcp_server import (
    database_report,
    insert_sample_data,
    restaurant_by_slug,
    store_restaurant_qr,
)


async def test_sample_data_then_lookup(hosted):
    counts = await insert_sample_data(hosted)
    assert counts == {"restaurants": 3, "categories": 9, "menu_items": 9}

    restaurant = await restaurant_by_slug(hosted, "burger-palace")
    assert restaurant["name"] == "The Burger Palace"
    json.dumps(restaurant)


async def test_sample_data_twice_fails(hosted):
    await insert_sample_data(hosted)
    with pytest.raises(BackendError):
        await insert_sample_data(hosted)


async def test_unknown_slug(hosted):
    with pytest.raises(ToolError):
        await restaurant_by_slug(hosted, "nowhere")


async def test_database_report(hosted):
    report = await database_report(hosted)
    assert "Restaurants table: Exists" in report
    assert "Menu items table: Exists" in report
    assert "Missing" not in report


async def test_database_report_on_unreachable_backend(unreachable):
    assert (await database_report(unreachable)).startswith("Database check failed")


async def test_qr_is_stored_and_recorded(hosted, tmp_path):
    await insert_sample_data(hosted)
    storage = LocalMediaStorage(tmp_path, "http://cdn.test/media", "qr-codes")
    rid = "11111111-1111-1111-1111-111111111111"

    result = await store_restaurant_qr(hosted, storage, "http://menu.test", rid, "bella-italia")

    assert result["link"] == "http://menu.test/r/bella-italia?src=qr"
    assert result["qr_url"] == f"http://cdn.test/media/qr-codes/{rid}/qr.png"
    assert (tmp_path / "qr-codes" / rid / "qr.png").read_bytes().startswith(b"\x89PNG")
    [row] = await hosted.select("restaurants", {"id": rid})
    assert row["qr_url"] == result["qr_url"]


async def test_tools_are_registered():
    names = {tool.name for tool in await mcp_server.mcp.list_tools()}
    assert names == {"getRestaurantBySlug", "generateRestaurantQr", "checkDatabase", "addSampleData"}
