"""Places provider proxy, exercised against httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from magicmenu.services.places import PlacesError, search_nearby


def _client(payload=None, calls=None, exc=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if exc is not None:
            raise exc
        return httpx.Response(200, json=payload)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_ok_results_and_query_params():
    calls: list[httpx.Request] = []
    async with _client({"status": "OK", "results": [{"name": "Bella Italia"}]}, calls) as client:
        results = await search_nearby(12.97, 77.59, "key-123", radius=1500, client=client)

    assert results == [{"name": "Bella Italia"}]
    params = calls[0].url.params
    assert params["location"] == "12.97,77.59"
    assert params["radius"] == "1500"
    assert params["type"] == "restaurant"
    assert params["key"] == "key-123"


async def test_results_are_cached():
    calls: list[httpx.Request] = []
    async with _client({"status": "OK", "results": []}, calls) as client:
        await search_nearby(1.0, 2.0, "k", client=client)
        await search_nearby(1.0, 2.0, "k", client=client)
    assert len(calls) == 1


async def test_zero_results_is_empty():
    async with _client({"status": "ZERO_RESULTS", "results": []}) as client:
        assert await search_nearby(3.0, 4.0, "k", client=client) == []


async def test_provider_error_status():
    payload = {"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."}
    async with _client(payload) as client:
        with pytest.raises(PlacesError) as info:
            await search_nearby(5.0, 6.0, "bad", client=client)

    assert info.value.status_code == 400
    assert "REQUEST_DENIED" in info.value.message
    assert info.value.details == "The provided API key is invalid."


async def test_network_failure():
    async with _client(exc=httpx.ConnectError("boom")) as client:
        with pytest.raises(PlacesError) as info:
            await search_nearby(7.0, 8.0, "k", client=client)
    assert info.value.status_code == 502
