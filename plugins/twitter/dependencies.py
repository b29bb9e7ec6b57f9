# plugins/twitter/dependencies.py
"""
FastAPI dependency providers for the Twitter plugin.

Tests replace get_client_factory (or get_store) through
app.dependency_overrides to run the flows without network access.
"""

from fastapi import Depends

from plugins.twitter.apps import AppAuthFlow
from plugins.twitter.broker import OAuthTokenBroker
from plugins.twitter.client import ClientFactory, TwitterAppClient
from plugins.twitter.config import get_twitter_settings
from plugins.twitter.registry import CredentialRegistry
from storage import KeyValueStore, get_store


def get_client_factory() -> ClientFactory:
    return TwitterAppClient


def get_registry(
    store: KeyValueStore = Depends(get_store),
    client_factory: ClientFactory = Depends(get_client_factory)
) -> CredentialRegistry:
    return CredentialRegistry(store, client_factory=client_factory)


def get_broker(
    store: KeyValueStore = Depends(get_store),
    registry: CredentialRegistry = Depends(get_registry),
    client_factory: ClientFactory = Depends(get_client_factory)
) -> OAuthTokenBroker:
    settings = get_twitter_settings()
    return OAuthTokenBroker(
        store,
        registry,
        callback_url=settings.OAUTH_CALLBACK_URL,
        client_factory=client_factory,
        temporary_token_ttl=settings.TEMPORARY_TOKEN_TTL_SECONDS
    )


def get_app_auth_flow(
    store: KeyValueStore = Depends(get_store),
    client_factory: ClientFactory = Depends(get_client_factory)
) -> AppAuthFlow:
    return AppAuthFlow(
        store,
        callback_url=get_twitter_settings().APPS_OAUTH_CALLBACK_URL,
        client_factory=client_factory
    )
