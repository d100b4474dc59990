"""
QR service — encodes a restaurant's public menu URL as a PNG.

512 px square, error correction level M, 2-module quiet zone.
Rendering is CPU-bound and runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import base64
import io
import logging

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M

logger = logging.getLogger(__name__)

QR_WIDTH = 512
QR_BORDER = 2


def build_menu_url(base_url: str, slug: str) -> str:
    """Public menu URL a scanned code opens; ?src=qr marks the traffic source."""
    return f"{base_url.rstrip('/')}/r/{slug}?src=qr"


def render_qr_png(data: str, width: int = QR_WIDTH, border: int = QR_BORDER) -> bytes:
    """Return PNG bytes of a black-on-white QR code for data."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=10,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white").get_image()
    image = image.convert("RGB").resize((width, width), Image.Resampling.NEAREST)
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def to_data_url(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


async def generate_qr_png(url: str) -> bytes:
    """Render off the event loop."""
    png = await asyncio.to_thread(render_qr_png, url)
    logger.debug("Rendered QR for %s (%d bytes)", url, len(png))
    return png


async def generate_qr_data_url(url: str) -> str:
    return to_data_url(await generate_qr_png(url))
