"""
Media storage — uploads logos and QR PNGs and returns their public URLs.

STORAGE_BACKEND=local  → files under MEDIA_ROOT/<container>/..., served at MEDIA_URL
STORAGE_BACKEND=azure  → blobs in an Azure Storage container
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from pathlib import Path
from typing import Optional, Protocol

from azure.core.exceptions import AzureError
from azure.storage.blob import BlobServiceClient, ContentSettings

from magicmenu.config import Settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an upload cannot be completed."""


class MediaStorage(Protocol):
    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str: ...


def guess_content_type(path: str, fallback: str = "application/octet-stream") -> str:
    ctype, _ = mimetypes.guess_type(path)
    return ctype or fallback


class LocalMediaStorage:
    """Writes into a directory that the app mounts as static files."""

    def __init__(self, root: str | Path, base_url: str, container: str) -> None:
        self.root = Path(root) / container
        self.base_url = f"{base_url.rstrip('/')}/{container}"

    def _write(self, path: str, data: bytes) -> None:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise StorageError(f"Refusing to write outside the media root: {path}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as exc:
            raise StorageError(f"Failed to store {path}: {exc}") from exc
        return f"{self.base_url}/{path}"


class AzureBlobStorage:
    """Uploads to one container; overwrites existing blobs (upsert)."""

    def __init__(self, connection_string: str, container: str) -> None:
        self.connection_string = connection_string
        self.container = container

    def _client(self) -> BlobServiceClient:
        return BlobServiceClient.from_connection_string(self.connection_string)

    def _upload(self, path: str, data: bytes, content_type: str) -> str:
        blob_client = self._client().get_blob_client(self.container, path)
        blob_client.upload_blob(
            data,
            overwrite=True,
            content_settings=ContentSettings(content_type=content_type),
        )
        return blob_client.url

    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        ctype = content_type or guess_content_type(path)
        try:
            return await asyncio.to_thread(self._upload, path, data, ctype)
        except (AzureError, OSError, ValueError) as exc:
            logger.error("Azure upload of %s/%s failed: %s", self.container, path, exc)
            raise StorageError(f"Failed to upload {path}: {exc}") from exc


def build_storage(settings: Settings, container: str) -> MediaStorage:
    """Storage for one bucket (logos or QR codes) as configured."""
    if settings.storage_backend == "azure":
        if not settings.azure_connection_string:
            raise StorageError("STORAGE_BACKEND=azure requires AZURE_CONNECTION_STRING")
        return AzureBlobStorage(settings.azure_connection_string, container)
    return LocalMediaStorage(settings.media_root, settings.media_url, container)
