"""
create_admin.py — create an admin account, or promote an existing one.

Admin is an ordinary user_type; nothing in the API grants it based on an
e-mail address, so the first admin has to be made here. The account is
written wherever DATA_MODE sends writes (see magicmenu.services.mirror).

Usage:
    python scripts/create_admin.py --email ops@example.com --password 's3cret-pass'
    python scripts/create_admin.py --email owner@example.com --promote
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from magicmenu.config import settings
from magicmenu.database import AsyncSessionLocal, engine
from magicmenu.services.auth import hash_password
from magicmenu.services.mirror import MutationMirror
from magicmenu.services.resolver import FallbackResolver
from magicmenu.store.hosted import HostedBackend
from magicmenu.store.local import build_local_store

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def run(email: str, password: str | None, promote: bool) -> int:
    store = build_local_store(settings.local_store_backend, settings.local_store_path)
    hosted = HostedBackend(AsyncSessionLocal)
    resolver = FallbackResolver(store, hosted, settings.data_mode)
    mirror = MutationMirror(store, hosted, settings.data_mode, resolver.notices)

    email = email.strip().lower()
    user = await resolver.find_one("users", {"email": email}, normalized=False)

    if user is not None:
        metadata = {**(user.get("user_metadata") or {}), "user_type": "admin"}
        changes = {"user_metadata": metadata}
        if password:
            changes["password_hash"] = hash_password(password)
        await mirror.update_entity("users", user["id"], changes)
        logger.info("Promoted %s (%s) to admin", email, user["id"])
    elif promote:
        logger.error("No account with e-mail %s", email)
        return 1
    elif not password or len(password) < 8:
        logger.error("A password of at least 8 characters is required for a new account")
        return 1
    else:
        user = await mirror.create_entity("users", {
            "email": email,
            "password_hash": hash_password(password),
            "last_sign_in_at": None,
            "user_metadata": {"first_name": "", "last_name": "", "user_type": "admin"},
        })
        logger.info("Created admin %s (%s)", email, user["id"])

    for notice in resolver.notices:
        logger.warning(notice)
    await engine.dispose()
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or promote a MagicMenu admin account.")
    parser.add_argument("--email", required=True, help="Account e-mail")
    parser.add_argument("--password", help="Password for a new account (or a reset for an existing one)")
    parser.add_argument("--promote", action="store_true", help="Only promote an existing account")
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args.email, args.password, args.promote)))


if __name__ == "__main__":
    main()
