# plugins/twitter/registry.py
"""
Credential Registry
===================

The registry owns the long-lived API credentials of every registered Twitter
app and resolves the credentials of users who authorized an app.

Records:
- main:twitter:app:<appKey>:app_credentials -> {appKey, appSecret}
- main:twitter:app:<appKey>:authorized_user:<oauthToken>
      -> {accessToken, accessTokenSecret, appKey}

App credentials are created once and never overwritten. User credentials are
written by the OAuth token broker; the registry only reads them.
"""

import logging
from typing import List, Optional

from pydantic import ValidationError

from errors import ConflictError, CredentialValidationError, NotFoundError
from plugins.twitter import keys
from plugins.twitter.client import ClientFactory, TwitterAppClient
from plugins.twitter.schemas import (
    FullCredentials,
    PersistentOAuthCredentials,
    TemporaryOAuthCredentials,
    TwitterAppCredentials,
)
from storage import KeyValueStore

logger = logging.getLogger(__name__)


def parse_record(model, data, description: str):
    """Validate a stored record, surfacing schema failures as CredentialValidationError."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid {description} record: {e.error_count()} error(s)")
        raise CredentialValidationError(f"Invalid {description}: {str(e)}")


class CredentialRegistry:
    """
    Registry of Twitter app credentials.

    Args:
        store (KeyValueStore): The store holding the credential records
        client_factory (ClientFactory): Builds API clients from resolved credentials
    """

    def __init__(self, store: KeyValueStore, client_factory: ClientFactory = TwitterAppClient):
        self.store = store
        self.client_factory = client_factory

    async def register(self, app_key: str, app_secret: str) -> str:
        """
        Register a new app.

        Args:
            app_key (str): The app's consumer key, unique across the registry
            app_secret (str): The app's consumer secret

        Returns:
            str: The registered app key

        Raises:
            CredentialValidationError: If the key or secret is empty or malformed
            ConflictError: If an app with this key already exists
        """
        try:
            credentials = TwitterAppCredentials(app_key=app_key, app_secret=app_secret)
        except ValidationError as e:
            raise CredentialValidationError(str(e))

        key = keys.app_credentials_key(credentials.app_key)

        if not self.store.set_if_absent(key, credentials.to_record()):
            raise ConflictError(f"Twitter app with key {key} already exists.")

        logger.info(f"Registered Twitter app {credentials.app_key}")
        return credentials.app_key

    async def load(self, app_key: str) -> TwitterAppCredentials:
        """
        Load the credentials of a registered app.

        Raises:
            NotFoundError: If no app is registered under this key
        """
        data = self.store.get(keys.app_credentials_key(app_key))

        if data is None:
            raise NotFoundError(f"Twitter app with key {app_key} not found.")

        return parse_record(TwitterAppCredentials, data, "app credentials")

    async def load_with_user(self, app_key: str, user_token: Optional[str] = None) -> FullCredentials:
        """
        Load app credentials merged with the access token pair of one user.

        The user is looked up among the app's authorized users first and, while
        an authorization is still pending, among the temporary request tokens
        issued for this app.

        Args:
            app_key (str): The app key
            user_token (Optional[str]): The user's OAuth token, if acting as a user

        Returns:
            FullCredentials: Credentials ready to build an API client

        Raises:
            NotFoundError: If the app or the requested user is missing
            CredentialValidationError: If the merged credentials fail validation
        """
        app_credentials = await self.load(app_key)

        merged = {
            "appKey": app_credentials.app_key,
            "appSecret": app_credentials.app_secret,
        }

        if user_token is not None:
            user_credentials = self._find_user_credentials(app_key, user_token)

            if user_credentials is None:
                raise NotFoundError(
                    f"OAuth credentials for appKey {app_key} and oAuthToken {user_token} not found."
                )

            merged["accessToken"] = user_credentials.access_token
            merged["accessTokenSecret"] = user_credentials.access_token_secret

        return parse_record(FullCredentials, merged, "credentials")

    def _find_user_credentials(self, app_key: str, user_token: str):
        data = self.store.get(keys.authorized_user_key(app_key, user_token))
        if data is not None:
            return parse_record(PersistentOAuthCredentials, data, "user credentials")

        data = self.store.get(keys.temporary_credentials_key(user_token))
        if data is not None:
            temporary = parse_record(TemporaryOAuthCredentials, data, "temporary credentials")
            # Request tokens of another app must not leak across namespaces
            if temporary.app_key == app_key:
                # An interrupted completion already holds the access pair
                return temporary.exchange or temporary

        return None

    async def list_authorized_users(self, app_key: str) -> List[str]:
        """
        List the OAuth tokens of every user who authorized the app.

        The order is whatever the store returns.

        Raises:
            NotFoundError: If no app is registered under this key
        """
        await self.load(app_key)

        prefix = keys.authorized_user_key(app_key)
        return [
            keys.strip_prefix(key, prefix)
            for key in self.store.list_keys(prefix + keys.SEPARATOR)
        ]

    async def create_client(self, app_key: str, user_token: Optional[str] = None) -> TwitterAppClient:
        """Build an API client for the app, acting as the given user if any."""
        credentials = await self.load_with_user(app_key, user_token)
        return self.client_factory(credentials)
