"""Registration, listing, logo upload, QR codes, menus, dishes and reviews over HTTP."""

from __future__ import annotations

import asyncio

from conftest import UnreachableBackend, sign_in

from magicmenu.config import settings
from magicmenu.services.mirror import MutationMirror

FORM = {
    "name": "Bella Italia",
    "description": "Homemade pasta",
    "phone": "+1 555 0123",
    "address": "123 Main Street",
    "slug": "bella-italia",
}
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _register(client, **overrides):
    return client.post("/api/restaurants/register", json={**FORM, **overrides})


# ── Registration ─────────────────────────────────────────────────────────────


def test_register_creates_restaurant(client):
    response = _register(client)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["restaurant"]["slug"] == "bella-italia"
    assert body["restaurant"]["review_count"] == 3
    assert body["restaurant"]["qr_url"].startswith("data:image/png;base64,")
    assert body["notices"] == []


def test_register_records_signed_in_owner(client):
    owner = sign_in(client, "owner-1", "owner")
    restaurant = _register(client).json()["restaurant"]
    assert restaurant["owner_user_id"] == owner["id"]


def test_register_rejects_duplicate_slug(client):
    assert _register(client).status_code == 200
    response = _register(client, name="Bella Italia Two", slug="  Bella   Italia!! ")
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


def test_register_rejects_missing_field(client):
    response = _register(client, phone="")
    assert response.status_code == 400
    assert response.json()["detail"].startswith("All fields are required")


def test_register_requires_slug(client):
    for form in ({k: v for k, v in FORM.items() if k != "slug"}, {**FORM, "slug": "   "}):
        response = client.post("/api/restaurants/register", json=form)
        assert response.status_code == 400
        assert response.headers["X-Error-Code"] == "REGISTRATION_INVALID"
        assert response.json()["detail"].endswith("(missing: slug)")
    assert client.get("/api/restaurants").json()["restaurants"] == []


def test_register_times_out(client, monkeypatch):
    async def never_finishes(self, form, owner_user_id=None, require_slug=False):
        await asyncio.sleep(5)

    monkeypatch.setattr(MutationMirror, "create_restaurant", never_finishes)
    monkeypatch.setattr(settings, "registration_timeout_seconds", 0.05)

    response = _register(client)
    assert response.status_code == 504
    assert response.json()["detail"] == "Registration timed out. Please try again."


def test_live_mode_backend_failure_is_503(client):
    client.app.state.data_mode = "live"
    client.app.state.hosted = UnreachableBackend()

    response = _register(client)
    assert response.status_code == 503
    assert response.json()["code"] == "BACKEND_UNAVAILABLE"


def test_unreachable_backend_in_fallback_mode_still_registers(client):
    client.app.state.hosted = UnreachableBackend()

    response = _register(client)
    assert response.status_code == 200
    assert response.json()["notices"]


# ── Listing ──────────────────────────────────────────────────────────────────


def test_list_and_search(client):
    _register(client)
    _register(
        client,
        name="Tokyo Sushi Bar",
        slug="tokyo-sushi-bar",
        description="Fresh fish",
        address="456 Oak Avenue",
    )

    everything = client.get("/api/restaurants").json()["restaurants"]
    assert {r["name"] for r in everything} == {"Bella Italia", "Tokyo Sushi Bar"}

    found = client.get("/api/restaurants", params={"q": "oak"}).json()["restaurants"]
    assert [r["name"] for r in found] == ["Tokyo Sushi Bar"]

    assert len(client.get("/api/restaurants", params={"limit": 1}).json()["restaurants"]) == 1


def test_hand_edited_record_without_slug_does_not_break_listing(client):
    _register(client)
    client.app.state.local_store.append("restaurants", {"id": "r-broken", "name": "Half Written"})

    response = client.get("/api/restaurants")
    assert response.status_code == 200
    assert [r["name"] for r in response.json()["restaurants"]] == ["Bella Italia"]


# ── Logo ─────────────────────────────────────────────────────────────────────


def test_logo_upload(client):
    rid = _register(client).json()["restaurant"]["id"]

    response = client.post(
        f"/api/restaurants/{rid}/logo",
        files={"logo": ("logo.PNG", PNG, "image/png")},
    )

    assert response.status_code == 200
    logo_url = response.json()["logo_url"]
    assert logo_url.endswith(f"/restaurant-logos/{rid}/logo.png")
    menu = client.get("/api/restaurants/bella-italia/menu").json()
    assert menu["restaurant"]["logo_url"] == logo_url


def test_logo_unknown_restaurant(client):
    response = client.post("/api/restaurants/nope/logo", files={"logo": ("a.png", PNG, "image/png")})
    assert response.status_code == 404
    assert response.headers["X-Error-Code"] == "RESTAURANT_NOT_FOUND"


def test_logo_validation(client, monkeypatch):
    rid = _register(client).json()["restaurant"]["id"]
    url = f"/api/restaurants/{rid}/logo"

    assert client.post(url).status_code == 400
    not_image = client.post(url, files={"logo": ("notes.txt", b"hello", "text/plain")})
    assert not_image.status_code == 400
    assert not_image.json()["detail"] == "File must be an image"

    monkeypatch.setattr(settings, "logo_max_bytes", 16)
    too_big = client.post(url, files={"logo": ("logo.png", PNG, "image/png")})
    assert too_big.status_code == 400
    assert "File size must be less than" in too_big.json()["detail"]


# ── QR ───────────────────────────────────────────────────────────────────────


def test_qr_for_known_restaurant_uses_slug(client):
    rid = _register(client).json()["restaurant"]["id"]

    body = client.post(f"/api/restaurants/{rid}/qr").json()

    assert body["encoded_url"] == f"{settings.app_public_url}/r/bella-italia?src=qr"
    assert body["restaurant_id"] == rid
    assert body["qr_url"].startswith("data:image/png;base64,")
    stored = client.app.state.local_store.get("restaurants", rid)
    assert stored["qr_url"] == body["qr_url"]


def test_qr_for_unknown_id_encodes_the_id(client):
    response = client.post("/api/restaurants/some-id/qr")
    assert response.status_code == 200
    assert response.json()["encoded_url"].endswith("/r/some-id?src=qr")


# ── Menu and dishes ──────────────────────────────────────────────────────────


def test_menu_orders_categories_and_hides_inactive_dishes(client):
    rid = _register(client).json()["restaurant"]["id"]
    store = client.app.state.local_store
    store.patch("menu_items", f"item-{rid}-5", {"is_active": False})

    menu = client.get("/api/restaurants/bella-italia/menu").json()

    assert [c["category"]["name"] for c in menu["categories"]] == ["Appetizers", "Main Courses", "Desserts"]
    assert [len(c["items"]) for c in menu["categories"]] == [2, 2, 0]
    assert menu["uncategorized"] == []


def test_menu_unknown_slug(client):
    response = client.get("/api/restaurants/nowhere/menu")
    assert response.status_code == 404
    assert response.headers["X-Error-Code"] == "RESTAURANT_NOT_FOUND"


def test_dish_detail(client):
    rid = _register(client).json()["restaurant"]["id"]

    body = client.get(f"/api/restaurants/bella-italia/dishes/item-{rid}-1").json()

    assert body["dish"]["name"] == "Caesar Salad"
    assert body["price_display"] == "$12.00"
    assert body["allergen_list"] == ["Dairy", "Gluten", "Eggs"]
    assert body["dish"]["nutrition_info"]["calories"] == "320"


def test_dish_detail_not_found(client):
    _register(client)
    response = client.get("/api/restaurants/bella-italia/dishes/missing")
    assert response.status_code == 404
    assert response.headers["X-Error-Code"] == "DISH_NOT_FOUND"


def test_dish_edit_requires_ownership(client):
    sign_in(client, "owner-1", "owner")
    rid = _register(client).json()["restaurant"]["id"]
    url = f"/api/restaurants/bella-italia/dishes/item-{rid}-3"

    updated = client.patch(url, json={"price_cents": 2950, "nutrition_info": {"calories": 400}})
    assert updated.status_code == 200
    assert updated.json()["price_display"] == "$29.50"
    assert updated.json()["dish"]["nutrition_info"]["calories"] == "400"

    sign_in(client, "owner-2", "owner")
    assert client.patch(url, json={"price_cents": 1}).status_code == 403

    client.post("/api/auth/logout")
    assert client.patch(url, json={"price_cents": 1}).status_code == 401


# ── Reviews ──────────────────────────────────────────────────────────────────


def test_reviews_require_sign_in_and_update_aggregates(client):
    rid = _register(client).json()["restaurant"]["id"]
    url = f"/api/restaurants/{rid}/reviews"

    assert client.post(url, json={"rating": 1}).status_code == 401

    sign_in(client, "cust-1")
    created = client.post(url, json={"rating": 1, "comment": " Too salty "})
    assert created.status_code == 201
    assert created.json()["comment"] == "Too salty"

    reviews = client.get(url).json()["reviews"]
    assert len(reviews) == 4
    assert reviews[0]["id"] == created.json()["id"]

    restaurant = client.get("/api/restaurants/bella-italia/menu").json()["restaurant"]
    assert restaurant["review_count"] == 4
    assert restaurant["avg_rating"] == 3.25


def test_review_rating_bounds(client):
    rid = _register(client).json()["restaurant"]["id"]
    sign_in(client, "cust-1")
    assert client.post(f"/api/restaurants/{rid}/reviews", json={"rating": 6}).status_code == 400


def test_review_for_unknown_restaurant(client):
    sign_in(client, "cust-1")
    assert client.post("/api/restaurants/ghost/reviews", json={"rating": 4}).status_code == 404
