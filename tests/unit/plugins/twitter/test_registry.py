"""
Unit tests for the Twitter credential registry
"""

import pytest

from errors import ConflictError, CredentialValidationError, NotFoundError
from plugins.twitter import keys
from plugins.twitter.registry import CredentialRegistry
from plugins.twitter.schemas import FullCredentials, TwitterAppCredentials

pytestmark = [pytest.mark.unit, pytest.mark.oauth_flow]


@pytest.fixture
def registry(store, fake_client_factory):
    return CredentialRegistry(store, client_factory=fake_client_factory)


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_persists_credentials(self, registry, store):
        result = await registry.register("k1", "s1")

        assert result == "k1"
        assert store.get("main:twitter:app:k1:app_credentials") == {"appKey": "k1", "appSecret": "s1"}

    @pytest.mark.asyncio
    async def test_register_twice_conflicts(self, registry, store):
        await registry.register("k1", "s1")

        with pytest.raises(ConflictError):
            await registry.register("k1", "other-secret")

        # The first secret is kept
        assert store.get(keys.app_credentials_key("k1"))["appSecret"] == "s1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("app_key, app_secret", [("", "s1"), ("k1", ""), ("k:1", "s1")])
    async def test_register_invalid_input(self, registry, store, app_key, app_secret):
        with pytest.raises(CredentialValidationError):
            await registry.register(app_key, app_secret)

        assert store.list_keys("main:twitter:") == []


class TestLoad:

    @pytest.mark.asyncio
    async def test_load_unregistered_app(self, registry):
        with pytest.raises(NotFoundError):
            await registry.load("k1")

    @pytest.mark.asyncio
    async def test_load_registered_app(self, registry):
        await registry.register("k1", "s1")

        credentials = await registry.load("k1")

        assert credentials == TwitterAppCredentials(app_key="k1", app_secret="s1")

    @pytest.mark.asyncio
    async def test_load_corrupt_record(self, registry, store):
        store.set(keys.app_credentials_key("k1"), {"appKey": "k1"})

        with pytest.raises(CredentialValidationError):
            await registry.load("k1")


class TestLoadWithUser:

    @pytest.mark.asyncio
    async def test_without_user_token(self, registry):
        await registry.register("k1", "s1")

        credentials = await registry.load_with_user("k1")

        assert credentials == FullCredentials(app_key="k1", app_secret="s1")
        assert credentials.access_token is None

    @pytest.mark.asyncio
    async def test_with_authorized_user(self, registry, store):
        await registry.register("k1", "s1")
        store.set(keys.authorized_user_key("k1", "user-token"), {
            "accessToken": "user-token",
            "accessTokenSecret": "user-secret",
            "appKey": "k1"
        })

        credentials = await registry.load_with_user("k1", "user-token")

        assert credentials.access_token == "user-token"
        assert credentials.access_token_secret == "user-secret"

    @pytest.mark.asyncio
    async def test_with_pending_temporary_token(self, registry, store):
        await registry.register("k1", "s1")
        store.set(keys.temporary_credentials_key("temp-token"), {
            "accessToken": "temp-token",
            "accessTokenSecret": "temp-secret",
            "appKey": "k1"
        })

        credentials = await registry.load_with_user("k1", "temp-token")

        assert credentials.access_token == "temp-token"
        assert credentials.access_token_secret == "temp-secret"

    @pytest.mark.asyncio
    async def test_exchanged_temporary_token_uses_access_pair(self, registry, store):
        await registry.register("k1", "s1")
        store.set(keys.temporary_credentials_key("temp-token"), {
            "accessToken": "temp-token",
            "accessTokenSecret": "temp-secret",
            "appKey": "k1",
            "exchange": {"accessToken": "user-token", "accessTokenSecret": "user-secret"}
        })

        credentials = await registry.load_with_user("k1", "temp-token")

        assert credentials.access_token == "user-token"
        assert credentials.access_token_secret == "user-secret"

    @pytest.mark.asyncio
    async def test_temporary_token_of_other_app_is_not_used(self, registry, store):
        await registry.register("k1", "s1")
        await registry.register("k2", "s2")
        store.set(keys.temporary_credentials_key("temp-token"), {
            "accessToken": "temp-token",
            "accessTokenSecret": "temp-secret",
            "appKey": "k2"
        })

        with pytest.raises(NotFoundError):
            await registry.load_with_user("k1", "temp-token")

    @pytest.mark.asyncio
    async def test_unknown_user(self, registry):
        await registry.register("k1", "s1")

        with pytest.raises(NotFoundError) as exc_info:
            await registry.load_with_user("k1", "unknown")

        assert "oAuthToken unknown" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unknown_app(self, registry):
        with pytest.raises(NotFoundError) as exc_info:
            await registry.load_with_user("k1", "user-token")

        assert "Twitter app with key k1 not found" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_user_record(self, registry, store):
        await registry.register("k1", "s1")
        store.set(keys.authorized_user_key("k1", "user-token"), {"accessToken": "user-token"})

        with pytest.raises(CredentialValidationError):
            await registry.load_with_user("k1", "user-token")


class TestListAuthorizedUsers:

    @pytest.mark.asyncio
    async def test_no_users(self, registry):
        await registry.register("k1", "s1")

        assert await registry.list_authorized_users("k1") == []

    @pytest.mark.asyncio
    async def test_users_are_listed_without_prefix(self, registry, store):
        await registry.register("k1", "s1")
        await registry.register("k10", "s10")
        for app_key, token in [("k1", "t1"), ("k1", "t2"), ("k10", "t3")]:
            store.set(keys.authorized_user_key(app_key, token), {
                "accessToken": token,
                "accessTokenSecret": f"{token}-secret",
                "appKey": app_key
            })

        users = await registry.list_authorized_users("k1")

        assert sorted(users) == ["t1", "t2"]

    @pytest.mark.asyncio
    async def test_unknown_app(self, registry):
        with pytest.raises(NotFoundError):
            await registry.list_authorized_users("k1")


class TestCreateClient:

    @pytest.mark.asyncio
    async def test_client_acts_as_user(self, registry, store):
        await registry.register("k1", "s1")
        store.set(keys.authorized_user_key("k1", "user-token"), {
            "accessToken": "user-token",
            "accessTokenSecret": "user-secret",
            "appKey": "k1"
        })

        client = await registry.create_client("k1", "user-token")

        assert client.auth_type == "user"
        assert client.credentials.app_secret == "s1"
        assert client.credentials.access_token_secret == "user-secret"
