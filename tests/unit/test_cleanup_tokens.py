"""
Unit tests for the temporary token cleanup script
"""

import pytest

import cleanup_tokens
from plugins.twitter import keys

pytestmark = [pytest.mark.unit, pytest.mark.storage]


@pytest.fixture
def pending_tokens(store, test_db, monkeypatch):
    monkeypatch.setattr(cleanup_tokens, "SessionLocal", lambda: test_db)

    store.set(keys.app_credentials_key("k1"), {"appKey": "k1", "appSecret": "s1"})
    store.set(keys.temporary_credentials_key("waiting-token"), {
        "accessToken": "waiting-token",
        "accessTokenSecret": "waiting-secret",
        "appKey": "k1"
    })
    store.set(keys.temporary_credentials_key("finished-token"), {
        "accessToken": "finished-token",
        "accessTokenSecret": "finished-secret",
        "appKey": "k1",
        "exchange": {"accessToken": "user-token", "accessTokenSecret": "user-secret"}
    })


@pytest.mark.asyncio
async def test_dry_run_only_lists(pending_tokens, store, capsys):
    await cleanup_tokens.cleanup_temporary_tokens()

    output = capsys.readouterr().out
    assert "Found 2 pending temporary tokens" in output
    assert "finished..." in output
    assert "waiting-..." in output
    assert len(store.list_keys(keys.temporary_credentials_prefix())) == 2


@pytest.mark.asyncio
async def test_apply_finishes_interrupted_callbacks(pending_tokens, store, capsys):
    await cleanup_tokens.cleanup_temporary_tokens(apply=True)

    output = capsys.readouterr().out
    assert "Removed 1 temporary tokens" in output
    assert store.list_keys(keys.temporary_credentials_prefix()) == [
        keys.temporary_credentials_key("waiting-token")
    ]
    assert store.get(keys.authorized_user_key("k1", "user-token")) == {
        "accessToken": "user-token",
        "accessTokenSecret": "user-secret",
        "appKey": "k1"
    }
