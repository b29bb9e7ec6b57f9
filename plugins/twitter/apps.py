# plugins/twitter/apps.py
"""
App-registration flow over the fs:twitter namespace.

Unlike the broker, permanent tokens here are stored under a fresh random
identifier rather than the OAuth token, so the long-lived record cannot be
guessed from the short-lived request token. Callers post tweets by that
identifier.
"""

import logging
import uuid

from pydantic import ValidationError

from errors import ConflictError, CredentialValidationError, NotFoundError
from plugins.twitter import keys
from plugins.twitter.client import ClientFactory, TwitterAppClient
from plugins.twitter.registry import parse_record
from plugins.twitter.schemas import AppTokens, FullCredentials, PermaTokens, TempOAuthTokens
from storage import KeyValueStore

logger = logging.getLogger(__name__)


def validate_tokens(model, tokens):
    if isinstance(tokens, model):
        return tokens
    try:
        return model.model_validate(tokens)
    except ValidationError as e:
        raise CredentialValidationError(str(e))


def save_app_tokens(store: KeyValueStore, tokens) -> AppTokens:
    """Save the credentials of a new app; an existing app is never overwritten."""
    tokens = validate_tokens(AppTokens, tokens)

    if not store.set_if_absent(keys.app_tokens_key(tokens.app_key), tokens.to_record()):
        raise ConflictError(f'App "{tokens.app_key}" already exists')

    return tokens


def get_app_tokens(store: KeyValueStore, app_key: str) -> AppTokens:
    data = store.get(keys.app_tokens_key(app_key))

    if data is None:
        raise NotFoundError(f"No tokens found for app key: {app_key}")

    return parse_record(AppTokens, data, "app tokens")


def save_temp_oauth_tokens(store: KeyValueStore, tokens) -> str:
    tokens = validate_tokens(TempOAuthTokens, tokens)

    if not store.set_if_absent(keys.temp_oauth_tokens_key(tokens.oauth_token), tokens.to_record()):
        raise ConflictError(f"Temporary tokens for token {tokens.oauth_token} already exist")

    return tokens.oauth_token


def get_temp_oauth_tokens(store: KeyValueStore, token: str) -> TempOAuthTokens:
    data = store.get(keys.temp_oauth_tokens_key(token))

    if data is None:
        raise NotFoundError(f"No tokens found for token: {token}")

    return parse_record(TempOAuthTokens, data, "temporary tokens")


def remove_temp_oauth_tokens(store: KeyValueStore, token: str) -> None:
    store.remove(keys.temp_oauth_tokens_key(token))


def save_permanent_oauth_tokens(store: KeyValueStore, tokens) -> str:
    """
    Save a permanent token pair under a new random identifier.

    Returns:
        str: The identifier to use with get_permanent_oauth_tokens
    """
    tokens = validate_tokens(PermaTokens, tokens)

    token_id = uuid.uuid4().hex
    store.set(keys.perma_oauth_tokens_key(token_id), tokens.to_record())

    return token_id


def get_permanent_oauth_tokens(store: KeyValueStore, token_id: str) -> PermaTokens:
    data = store.get(keys.perma_oauth_tokens_key(token_id))

    if data is None:
        raise NotFoundError(f"No tokens found for id: {token_id}")

    return parse_record(PermaTokens, data, "permanent tokens")


class AppAuthFlow:
    """
    OAuth1.0a flow for apps registered in the fs:twitter namespace.

    Args:
        store (KeyValueStore): The store holding the app and token records
        callback_url (str): Callback URL handed to the platform
        client_factory (ClientFactory): Builds API clients from credentials
    """

    def __init__(self, store: KeyValueStore, callback_url: str, client_factory: ClientFactory = TwitterAppClient):
        self.store = store
        self.callback_url = callback_url
        self.client_factory = client_factory

    async def start(self, app_key: str) -> str:
        """Issue a temporary token for the app and return the authorization URL."""
        app_tokens = get_app_tokens(self.store, app_key)

        client = self.client_factory(FullCredentials(
            app_key=app_tokens.app_key,
            app_secret=app_tokens.app_secret
        ))
        auth_link = client.generate_auth_link(self.callback_url)

        save_temp_oauth_tokens(self.store, TempOAuthTokens(
            oauth_token=auth_link.oauth_token,
            oauth_token_secret=auth_link.oauth_token_secret,
            app_key=app_tokens.app_key
        ))

        return auth_link.url

    async def complete(self, oauth_token: str, verifier: str) -> str:
        """
        Exchange the temporary token for permanent tokens.

        Returns:
            str: The identifier of the stored permanent tokens
        """
        temp_tokens = get_temp_oauth_tokens(self.store, oauth_token)
        app_tokens = get_app_tokens(self.store, temp_tokens.app_key)

        client = self.client_factory(FullCredentials(
            app_key=app_tokens.app_key,
            app_secret=app_tokens.app_secret,
            access_token=temp_tokens.oauth_token,
            access_token_secret=temp_tokens.oauth_token_secret
        ))
        login_result = client.login(verifier)

        token_id = save_permanent_oauth_tokens(self.store, PermaTokens(
            access_token=login_result.access_token,
            access_secret=login_result.access_secret,
            app_key=app_tokens.app_key
        ))
        remove_temp_oauth_tokens(self.store, oauth_token)

        logger.info(f"Stored permanent tokens {token_id} for app {app_tokens.app_key}")
        return token_id

    async def post_tweet(self, token_id: str, text: str) -> str:
        """Post a tweet with the permanent tokens stored under token_id."""
        perma_tokens = get_permanent_oauth_tokens(self.store, token_id)
        app_tokens = get_app_tokens(self.store, perma_tokens.app_key)

        client = self.client_factory(FullCredentials(
            app_key=app_tokens.app_key,
            app_secret=app_tokens.app_secret,
            access_token=perma_tokens.access_token,
            access_token_secret=perma_tokens.access_secret
        ))
        return client.create_tweet(text)
