#!/usr/bin/env python3
"""
Script to inspect and clean up temporary OAuth request tokens.

Usage:
  python cleanup_tokens.py          # list pending tokens
  python cleanup_tokens.py apply    # finish interrupted callbacks, drop expired tokens
"""

import asyncio
import sys

from database import Base, SessionLocal, engine


async def cleanup_temporary_tokens(apply=False):
    """List pending temporary tokens and optionally clean them up."""
    # Import models first so the kv_items table is registered
    import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    from plugins.twitter.broker import OAuthTokenBroker
    from plugins.twitter.config import get_twitter_settings
    from plugins.twitter.registry import CredentialRegistry
    from storage import DatabaseKeyValueStore

    settings = get_twitter_settings()
    db = SessionLocal()

    try:
        store = DatabaseKeyValueStore(db)
        broker = OAuthTokenBroker(
            store,
            CredentialRegistry(store),
            callback_url=settings.OAUTH_CALLBACK_URL,
            temporary_token_ttl=settings.TEMPORARY_TOKEN_TTL_SECONDS
        )

        pending = await broker.list_pending_tokens()
        print(f"Found {len(pending)} pending temporary tokens")
        for token in pending:
            print(f"  {token[:8]}...")

        if not apply:
            return

        removed = await broker.cleanup_temporary_tokens()
        print(f"Removed {len(removed)} temporary tokens")
    finally:
        db.close()


if __name__ == "__main__":
    apply = len(sys.argv) > 1 and sys.argv[1] == "apply"
    asyncio.run(cleanup_temporary_tokens(apply))
