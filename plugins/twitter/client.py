# plugins/twitter/client.py
"""
Twitter API Client
==================

This module wraps tweepy for the three calls the credential broker needs:

- generate_auth_link: obtain a request token and the platform authorization URL
- login: exchange a request token and verifier for a permanent access token pair
- create_tweet: post a tweet on behalf of an authorized user

The client is constructed from a FullCredentials record. When the record
carries an access token pair the client acts on behalf of that user
(auth_type "user"), otherwise only with the app credentials (auth_type "app").

Every tweepy failure is logged and surfaced as an UpstreamError.
"""

import logging
from dataclasses import dataclass
from typing import Callable

import tweepy

from errors import UpstreamError
from plugins.twitter.config import get_twitter_settings
from plugins.twitter.schemas import FullCredentials

logger = logging.getLogger(__name__)


@dataclass
class AuthLink:
    url: str
    oauth_token: str
    oauth_token_secret: str


@dataclass
class LoginResult:
    access_token: str
    access_secret: str


class TwitterAppClient:
    """
    Twitter OAuth1.0a client for one app, optionally acting as one user.

    Attributes:
        credentials (FullCredentials): The credentials the client was built from
        auth_type (str): "user" when an access token pair is present, "app" otherwise
    """

    def __init__(self, credentials: FullCredentials):
        self.credentials = credentials
        self.auth_type = "app"
        if credentials.access_token or credentials.access_token_secret:
            self.auth_type = "user"

    def get_oauth_handler(self, callback_url: str = None) -> tweepy.OAuth1UserHandler:
        """
        Get a Twitter OAuth handler for this app.

        Args:
            callback_url (str, optional): Callback URL for the OAuth flow

        Returns:
            tweepy.OAuth1UserHandler: Configured OAuth handler
        """
        return tweepy.OAuth1UserHandler(
            self.credentials.app_key,
            self.credentials.app_secret,
            callback=callback_url
        )

    def generate_auth_link(self, callback_url: str) -> AuthLink:
        """
        Request a temporary token and build the authorization URL.

        Args:
            callback_url (str): Where the platform redirects the user after approval

        Returns:
            AuthLink: The authorization URL and the temporary token pair

        Raises:
            UpstreamError: If the platform rejects the request
        """
        auth = self.get_oauth_handler(callback_url)

        try:
            url = auth.get_authorization_url(
                signin_with_twitter=get_twitter_settings().SIGNIN_WITH_TWITTER
            )
        except tweepy.TweepyException as e:
            logger.error(f"Could not generate auth link for app {self.credentials.app_key}: {str(e)}")
            raise UpstreamError("Could not generate auth link")

        request_token = auth.request_token
        return AuthLink(
            url=url,
            oauth_token=request_token["oauth_token"],
            oauth_token_secret=request_token["oauth_token_secret"]
        )

    def login(self, verifier: str) -> LoginResult:
        """
        Exchange the temporary token held by this client for an access token.

        Args:
            verifier (str): The OAuth verifier returned by the platform

        Returns:
            LoginResult: The permanent access token pair

        Raises:
            UpstreamError: If the client has no temporary token or the exchange fails
        """
        if self.auth_type != "user":
            raise UpstreamError("User credentials not found")

        auth = self.get_oauth_handler()
        auth.request_token = {
            "oauth_token": self.credentials.access_token,
            "oauth_token_secret": self.credentials.access_token_secret
        }

        try:
            access_token, access_secret = auth.get_access_token(verifier)
        except tweepy.TweepyException as e:
            logger.error(f"Twitter OAuth error for app {self.credentials.app_key}: {str(e)}")
            raise UpstreamError("Could not verify user")

        return LoginResult(access_token=access_token, access_secret=access_secret)

    def get_api_client(self) -> tweepy.Client:
        return tweepy.Client(
            consumer_key=self.credentials.app_key,
            consumer_secret=self.credentials.app_secret,
            access_token=self.credentials.access_token,
            access_token_secret=self.credentials.access_token_secret
        )

    def create_tweet(self, text: str) -> str:
        """
        Post a tweet as the user this client acts for.

        Returns:
            str: The ID of the posted tweet

        Raises:
            UpstreamError: If the client has no user tokens or the API call fails
        """
        if self.auth_type != "user":
            raise UpstreamError("Posting requires an authorized user")

        try:
            response = self.get_api_client().create_tweet(text=text)
        except tweepy.TweepyException as e:
            logger.error(f"Failed to post tweet for app {self.credentials.app_key}: {str(e)}")
            raise UpstreamError(f"Failed to post tweet: {str(e)}")

        return str(response.data["id"])


ClientFactory = Callable[[FullCredentials], TwitterAppClient]
