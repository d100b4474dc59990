"""Read path: local precedence, data modes, degraded hosted backend."""

from __future__ import annotations

from magicmenu.services.resolver import BACKEND_UNAVAILABLE_NOTICE, FallbackResolver

TOKYO = {"id": "r-tokyo", "slug": "tokyo-sushi-bar", "name": "Tokyo Sushi Bar"}
BELLA = {"id": "r-bella", "slug": "bella-italia", "name": "Bella Italia"}


async def test_local_records_hide_hosted_ones(store, hosted):
    store.write("restaurants", [TOKYO])
    await hosted.insert("restaurants", BELLA)

    resolver = FallbackResolver(store, hosted, "fallback")
    names = [r["name"] for r in await resolver.resolve("restaurants")]

    assert names == ["Tokyo Sushi Bar"]
    assert resolver.last_source == "local"


async def test_filter_miss_in_local_does_not_fall_through(store, hosted):
    store.write("restaurants", [TOKYO])
    await hosted.insert("restaurants", BELLA)

    resolver = FallbackResolver(store, hosted, "fallback")
    assert await resolver.find_one("restaurants", {"slug": "bella-italia"}) is None


async def test_empty_local_collection_reads_hosted(store, hosted):
    await hosted.insert("restaurants", BELLA)

    resolver = FallbackResolver(store, hosted, "fallback")
    found = await resolver.find_one("restaurants", {"slug": "bella-italia"})

    assert found["name"] == "Bella Italia"
    assert resolver.last_source == "hosted"


async def test_records_are_normalized_from_both_sources(store, hosted):
    await hosted.insert("restaurants", BELLA)
    from_hosted = (await FallbackResolver(store, hosted).resolve("restaurants"))[0]

    store.write("restaurants", [{**BELLA, "extra": "ignored"}])
    from_local = (await FallbackResolver(store, hosted).resolve("restaurants"))[0]

    assert set(from_local) == set(from_hosted)
    assert from_local["avg_rating"] == 0.0
    assert from_local["review_count"] == 0
    assert from_local["description"] == ""
    assert "extra" not in from_local


async def test_demo_mode_never_touches_hosted(store, hosted):
    await hosted.insert("restaurants", BELLA)
    resolver = FallbackResolver(store, hosted, "demo")
    assert await resolver.resolve("restaurants") == []


async def test_live_mode_ignores_local(store, hosted):
    store.write("restaurants", [TOKYO])
    await hosted.insert("restaurants", BELLA)
    resolver = FallbackResolver(store, hosted, "live")
    assert [r["name"] for r in await resolver.resolve("restaurants")] == ["Bella Italia"]


async def test_unreachable_backend_yields_empty_and_notice(store, unreachable):
    notices: list[str] = []
    resolver = FallbackResolver(store, unreachable, "fallback", notices)

    assert await resolver.resolve("restaurants") == []
    assert await resolver.resolve("categories") == []
    assert notices == [BACKEND_UNAVAILABLE_NOTICE]


async def test_predicate_and_limit(store):
    store.write("restaurants", [TOKYO, BELLA, {**TOKYO, "id": "r-3", "slug": "t2"}])
    resolver = FallbackResolver(store, None, "fallback")

    matches = await resolver.resolve("restaurants", predicate=lambda r: "Tokyo" in r["name"], limit=1)
    assert [r["id"] for r in matches] == ["r-tokyo"]


async def test_raw_records_keep_private_fields(store):
    store.write("users", [{"id": "u1", "email": "a@b.c", "password_hash": "x"}])
    resolver = FallbackResolver(store, None)

    assert "password_hash" not in await resolver.find_one("users", {"id": "u1"})
    assert (await resolver.find_one("users", {"id": "u1"}, normalized=False))["password_hash"] == "x"


async def test_malformed_local_records_are_skipped(store, caplog):
    store.write("restaurants", [{"id": "r-broken", "name": "No Slug"}, TOKYO])
    resolver = FallbackResolver(store, None, "demo")

    assert [r["id"] for r in await resolver.resolve("restaurants")] == ["r-tokyo"]
    assert (await resolver.find_one("restaurants"))["id"] == "r-tokyo"
    assert "r-broken" in caplog.text
