"""QR rendering and local media storage."""

from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from magicmenu.services.qr import build_menu_url, generate_qr_data_url, render_qr_png
from magicmenu.services.storage import LocalMediaStorage, StorageError, guess_content_type


def test_menu_url():
    assert build_menu_url("https://menu.example/", "bella-italia") == "https://menu.example/r/bella-italia?src=qr"


def test_qr_png_is_512_square():
    png = render_qr_png("https://menu.example/r/bella-italia?src=qr")
    image = Image.open(io.BytesIO(png))
    assert image.format == "PNG"
    assert image.size == (512, 512)


async def test_qr_data_url():
    data_url = await generate_qr_data_url("https://menu.example/r/x?src=qr")
    prefix = "data:image/png;base64,"
    assert data_url.startswith(prefix)
    assert base64.b64decode(data_url[len(prefix):]).startswith(b"\x89PNG")


async def test_local_storage_writes_and_returns_url(tmp_path):
    storage = LocalMediaStorage(tmp_path, "http://cdn.test/media/", "restaurant-logos")
    url = await storage.upload("r1/logo.png", b"png-bytes", "image/png")

    assert url == "http://cdn.test/media/restaurant-logos/r1/logo.png"
    assert (tmp_path / "restaurant-logos" / "r1" / "logo.png").read_bytes() == b"png-bytes"


async def test_local_storage_refuses_traversal(tmp_path):
    storage = LocalMediaStorage(tmp_path, "http://cdn.test/media", "qr-codes")
    with pytest.raises(StorageError):
        await storage.upload("../../escape.png", b"x")


def test_guess_content_type():
    assert guess_content_type("a/logo.png") == "image/png"
    assert guess_content_type("a/blob") == "application/octet-stream"
