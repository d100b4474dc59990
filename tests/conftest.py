"""
Shared fixtures.

Settings are read once at import time, so the environment is pointed at
throwaway locations before anything from magicmenu is imported.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="magicmenu-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TMP / 'app.db'}")
os.environ.setdefault("LOCAL_STORE_BACKEND", "memory")
os.environ.setdefault("MEDIA_ROOT", str(_TMP / "media"))
os.environ.setdefault("MEDIA_URL", "http://testserver/media")
os.environ.setdefault("APP_PUBLIC_URL", "http://menu.test")
os.environ.setdefault("SESSION_SECRET", "test-secret")
os.environ.setdefault("APP_ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from magicmenu.models import Base
from magicmenu.services.auth import hash_password
from magicmenu.services.places import clear_cache
from magicmenu.store.hosted import BackendError, HostedBackend
from magicmenu.store.local import LocalRecordStore, MemoryBackend

PASSWORD = "correct-horse-battery"


@pytest.fixture
def store() -> LocalRecordStore:
    return LocalRecordStore(MemoryBackend())


@pytest.fixture
async def hosted(tmp_path):
    """A HostedBackend over a fresh SQLite file, tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'hosted.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield HostedBackend(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))
    await engine.dispose()


class UnreachableBackend:
    """Stands in for a hosted backend whose every call fails."""

    async def ping(self) -> bool:
        return False

    async def _fail(self, *args, **kwargs):
        raise BackendError("connection refused")

    select = insert = insert_many = update = delete = table_exists = _fail


@pytest.fixture
def unreachable() -> UnreachableBackend:
    return UnreachableBackend()


@pytest.fixture(autouse=True)
def _fresh_places_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def client(tmp_path):
    """
    TestClient in fallback mode with an empty in-memory local store and its
    own hosted database.
    """
    from magicmenu.main import app

    db_file = tmp_path / "api.db"
    sync_engine = create_engine(f"sqlite:///{db_file}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    # NullPool: connections must not outlive the TestClient event loop
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_file}", poolclass=NullPool)

    with TestClient(app) as test_client:
        app.state.local_store = LocalRecordStore(MemoryBackend())
        app.state.hosted = HostedBackend(
            async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        )
        app.state.data_mode = "fallback"
        yield test_client


def add_user(store: LocalRecordStore, user_id: str, user_type: str, email: str | None = None) -> dict:
    """Put an account with PASSWORD straight into the local store."""
    return store.upsert("users", {
        "id": user_id,
        "email": email or f"{user_id}@example.com",
        "password_hash": hash_password(PASSWORD),
        "created_at": "2024-01-01T00:00:00+00:00",
        "last_sign_in_at": None,
        "user_metadata": {"first_name": user_id, "last_name": "", "user_type": user_type},
    })


def sign_in(client: TestClient, user_id: str, user_type: str = "customer") -> dict:
    """Create a local account and log the client in as it."""
    user = add_user(client.app.state.local_store, user_id, user_type)
    response = client.post("/api/auth/login", json={"email": user["email"], "password": PASSWORD})
    assert response.status_code == 200, response.text
    return user
