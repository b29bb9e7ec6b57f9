# plugins/twitter/broker.py
"""
OAuth Token Broker
==================

This module implements the OAuth1.0a three-legged flow for registered apps:

1. request_auth_url: obtain a temporary request token from the platform and
   store it under main:twitter:temporary_oauth_credentials:<token>
2. The user approves the app on the platform, which redirects back with the
   token and a verifier
3. handle_callback: exchange token and verifier for a permanent access token
   pair, store it under the app's authorized_user namespace and remove the
   temporary record

State of one authorization attempt:

    [no token] --request_auth_url--> [issued] --handle_callback--> [verified]
                                        |
                                        +-- exchange fails --> [issued] (retry allowed)

The store has no multi-key transactions, so completing a callback takes three
single-key writes: the exchanged pair is recorded on the temporary record, the
persistent record is written, then the temporary record is removed. A callback
repeated after an interrupted completion finishes the remaining writes without
calling the platform again.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from errors import ConflictError, NotFoundError
from plugins.twitter import keys
from plugins.twitter.client import ClientFactory, TwitterAppClient
from plugins.twitter.registry import CredentialRegistry, parse_record
from plugins.twitter.schemas import (
    AuthorizationRequest,
    ExchangedTokens,
    FullCredentials,
    PersistentOAuthCredentials,
    TemporaryOAuthCredentials,
)
from storage import KeyValueStore

logger = logging.getLogger(__name__)


class OAuthTokenBroker:
    """
    Broker for temporary request tokens and permanent user access tokens.

    Args:
        store (KeyValueStore): The store holding the token records
        registry (CredentialRegistry): Registry used to resolve app credentials
        callback_url (str): Callback URL handed to the platform
        client_factory (ClientFactory): Builds API clients from credentials
        temporary_token_ttl (Optional[int]): Seconds after which an unused
            temporary token expires; temporary tokens never expire when None
        clock (Callable[[], datetime]): Returns the current UTC time
    """

    def __init__(
        self,
        store: KeyValueStore,
        registry: CredentialRegistry,
        callback_url: str,
        client_factory: ClientFactory = TwitterAppClient,
        temporary_token_ttl: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        self.store = store
        self.registry = registry
        self.callback_url = callback_url
        self.client_factory = client_factory
        self.temporary_token_ttl = temporary_token_ttl
        self.clock = clock

    async def request_auth_url(self, app_key: str) -> AuthorizationRequest:
        """
        Start an authorization attempt for an app.

        Args:
            app_key (str): The registered app key

        Returns:
            AuthorizationRequest: The platform URL to redirect the user to,
                                  with the temporary token pair

        Raises:
            NotFoundError: If the app is not registered
            UpstreamError: If the platform does not issue a request token
            ConflictError: If a record already exists for the issued token
        """
        app_credentials = await self.registry.load(app_key)

        client = self.client_factory(FullCredentials(
            app_key=app_credentials.app_key,
            app_secret=app_credentials.app_secret
        ))
        auth_link = client.generate_auth_link(self.callback_url)

        key = keys.temporary_credentials_key(auth_link.oauth_token)
        temporary = TemporaryOAuthCredentials(
            access_token=auth_link.oauth_token,
            access_token_secret=auth_link.oauth_token_secret,
            app_key=app_credentials.app_key,
            created_at=self.clock()
        )

        if not self.store.set_if_absent(key, temporary.to_record()):
            raise ConflictError(f"Temporary oauth token with key {key} already exists.")

        logger.info(f"Issued temporary OAuth token for app {app_key}")
        return AuthorizationRequest(
            url=auth_link.url,
            token=auth_link.oauth_token,
            token_secret=auth_link.oauth_token_secret
        )

    async def handle_callback(self, token: str, verifier: str) -> bool:
        """
        Complete an authorization attempt.

        Args:
            token (str): The temporary OAuth token returned by the platform
            verifier (str): The OAuth verifier returned by the platform

        Returns:
            bool: True once the user's permanent credentials are stored

        Raises:
            NotFoundError: If the temporary token is unknown, already used or
                           expired, or its app no longer exists
            UpstreamError: If the token exchange fails; the temporary token
                           is kept so the attempt can be retried
        """
        key = keys.temporary_credentials_key(token)
        temporary = self._load_temporary(key)

        if temporary is None:
            raise NotFoundError(f"Temporary oauth token with key {key} not found.")

        # An exchanged record holds the issued access pair and is finished regardless of age
        if temporary.exchange is None and self._is_expired(temporary):
            self.store.remove(key)
            logger.info(f"Removed expired temporary OAuth token for app {temporary.app_key}")
            raise NotFoundError(f"Temporary oauth token with key {key} has expired.")

        app_credentials = await self.registry.load(temporary.app_key)

        if temporary.exchange is None:
            client = self.client_factory(FullCredentials(
                app_key=app_credentials.app_key,
                app_secret=app_credentials.app_secret,
                access_token=temporary.access_token,
                access_token_secret=temporary.access_token_secret
            ))
            login_result = client.login(verifier)

            temporary.exchange = ExchangedTokens(
                access_token=login_result.access_token,
                access_token_secret=login_result.access_secret
            )
            self.store.set(key, temporary.to_record())
        else:
            logger.warning(f"Resuming interrupted OAuth completion for app {temporary.app_key}")

        self._complete(key, temporary)
        logger.info(f"Authorized new user for app {temporary.app_key}")
        return True

    async def list_pending_tokens(self) -> List[str]:
        """List the temporary tokens of every outstanding authorization attempt."""
        prefix = keys.temporary_credentials_prefix()
        return [keys.strip_prefix(key, prefix) for key in self.store.list_keys(prefix)]

    async def cleanup_temporary_tokens(self) -> List[str]:
        """
        Remove temporary tokens that are no longer needed.

        Interrupted completions are finished first, then expired tokens are
        removed when a TTL is configured.

        Returns:
            List[str]: The temporary tokens that were removed
        """
        removed = []

        for token in await self.list_pending_tokens():
            key = keys.temporary_credentials_key(token)
            temporary = self._load_temporary(key)

            if temporary is None:
                continue

            if temporary.exchange is not None:
                self._complete(key, temporary)
                removed.append(token)
            elif self._is_expired(temporary):
                self.store.remove(key)
                removed.append(token)

        if removed:
            logger.info(f"Cleaned up {len(removed)} temporary OAuth token(s)")
        return removed

    def _load_temporary(self, key: str) -> Optional[TemporaryOAuthCredentials]:
        data = self.store.get(key)
        if data is None:
            return None
        return parse_record(TemporaryOAuthCredentials, data, "temporary credentials")

    def _is_expired(self, temporary: TemporaryOAuthCredentials) -> bool:
        # Records written before expiry was configured carry no timestamp
        if self.temporary_token_ttl is None or temporary.created_at is None:
            return False
        expires_at = temporary.created_at + timedelta(seconds=self.temporary_token_ttl)
        return self.clock() >= expires_at

    def _complete(self, key: str, temporary: TemporaryOAuthCredentials) -> None:
        exchange = temporary.exchange
        user_key = keys.authorized_user_key(temporary.app_key, exchange.access_token)

        self.store.set(user_key, PersistentOAuthCredentials(
            access_token=exchange.access_token,
            access_token_secret=exchange.access_token_secret,
            app_key=temporary.app_key
        ).to_record())
        self.store.remove(key)
