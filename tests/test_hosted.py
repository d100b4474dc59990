"""HostedBackend over SQLite."""

from __future__ import annotations

import pytest

from magicmenu.store.hosted import BackendError


async def test_insert_returns_defaults_and_iso_timestamps(hosted):
    record = await hosted.insert("menu_items", {"id": "m1", "restaurant_id": "r1", "name": "Soup"})
    assert record["currency_code"] == "USD"
    assert record["is_active"] is True
    assert record["price_cents"] == 0
    assert isinstance(record["created_at"], str)


async def test_categories_come_back_in_display_order(hosted):
    for cid, order in (("c-b", 2), ("c-c", 3), ("c-a", 1)):
        await hosted.insert("categories", {"id": cid, "restaurant_id": "r1", "name": cid, "sort_order": order})
    rows = await hosted.select("categories", {"restaurant_id": "r1"})
    assert [r["id"] for r in rows] == ["c-a", "c-b", "c-c"]


async def test_update_and_delete(hosted):
    await hosted.insert("restaurants", {"id": "r1", "slug": "r1", "name": "Old"})

    updated = await hosted.update("restaurants", "r1", {"name": "New", "ignored": 1})
    assert updated["name"] == "New"
    assert await hosted.update("restaurants", "missing", {"name": "x"}) is None

    assert await hosted.delete("restaurants", "r1") is True
    assert await hosted.delete("restaurants", "r1") is False


async def test_review_writes_recompute_aggregates(hosted):
    await hosted.insert("restaurants", {"id": "r1", "slug": "r1", "name": "R"})
    await hosted.insert("reviews", {"id": "v1", "restaurant_id": "r1", "rating": 5})
    await hosted.insert("reviews", {"id": "v2", "restaurant_id": "r1", "rating": 2})
    await hosted.delete("reviews", "v1")

    [restaurant] = await hosted.select("restaurants", {"id": "r1"})
    assert (restaurant["avg_rating"], restaurant["review_count"]) == (2.0, 1)


async def test_errors_become_backend_errors(hosted):
    await hosted.insert("restaurants", {"id": "r1", "slug": "same", "name": "A"})
    with pytest.raises(BackendError):
        await hosted.insert("restaurants", {"id": "r2", "slug": "same", "name": "B"})
    with pytest.raises(BackendError):
        await hosted.select("orders")
    with pytest.raises(BackendError):
        await hosted.select("restaurants", {"colour": "red"})


async def test_table_exists_and_ping(hosted):
    assert await hosted.ping() is True
    assert await hosted.table_exists("reviews") is True
