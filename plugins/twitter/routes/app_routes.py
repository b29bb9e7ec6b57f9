# plugins/twitter/routes/app_routes.py
"""
Twitter App Routes
==================

This module implements the HTTP routes for registered Twitter apps. It lets
clients register app credentials, send users through the OAuth1.0a flow of an
app, list the users who authorized an app and post tweets on their behalf.

Routes (mounted under "/twitter"):
- POST /app/create: Register an app
- GET  /app/auth/{app_key}: Redirect a user to the platform's authorization page
- GET  /app/auth/callback: Complete an authorization
- GET  /app/{app_key}/users: List the app's authorized users
- POST /app/{app_key}/{oauth_token}/tweet: Post a tweet as an authorized user
"""

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse

from errors import CredentialError
from plugins import RoutePlugin
from plugins.twitter.broker import OAuthTokenBroker
from plugins.twitter.config import get_twitter_settings
from plugins.twitter.dependencies import get_broker, get_registry
from plugins.twitter.registry import CredentialRegistry
from plugins.twitter.routes.validation import credential_error, read_body, validate_data
from plugins.twitter.schemas import AuthParams, TweetRequest, TwitterAppCredentials

logger = logging.getLogger(__name__)


class TwitterAppRoutes(RoutePlugin):
    """
    Plugin for registered Twitter app routes.

    The routes are mounted under the "/twitter" prefix in the application.

    Class Attributes:
        service_name (str): The unique identifier for this plugin
    """

    service_name = "twitter"

    def get_router(self) -> APIRouter:
        """
        Get the router for Twitter app routes.

        Returns:
            APIRouter: FastAPI router with the app registration and OAuth routes
        """
        router = APIRouter(tags=["twitter", "oauth"])

        @router.post("/app/create")
        async def create_app(
            request: Request,
            registry: CredentialRegistry = Depends(get_registry)
        ) -> str:
            """Register the app credentials given in the request body."""
            credentials = await read_body(request, TwitterAppCredentials)

            try:
                return await registry.register(credentials.app_key, credentials.app_secret)
            except CredentialError as e:
                raise credential_error(e)

        # Declared before /app/auth/{app_key} so "callback" is not taken for an app key
        @router.get("/app/auth/callback")
        async def app_auth_callback(
            oauth_token: str = Query(None),
            oauth_verifier: str = Query(None),
            broker: OAuthTokenBroker = Depends(get_broker)
        ):
            """
            Handle the platform's redirect after a user approved an app.

            Returns:
                bool | RedirectResponse: True, or a redirect when
                TWITTER_POST_AUTH_REDIRECT_URL is configured
            """
            params = validate_data(AuthParams, {
                "oauth_token": oauth_token,
                "oauth_verifier": oauth_verifier
            })

            try:
                await broker.handle_callback(params.oauth_token, params.oauth_verifier)
            except CredentialError as e:
                raise credential_error(e)
            except Exception as e:
                logger.error(f"Error processing Twitter OAuth callback: {str(e)}")
                raise HTTPException(
                    status_code=500,
                    detail="Error processing Twitter OAuth callback"
                )

            redirect_url = get_twitter_settings().POST_AUTH_REDIRECT_URL
            if redirect_url:
                return RedirectResponse(redirect_url, status_code=303)
            return True

        # Declared before /app/{app_key}/users so "auth" is not taken for an app key
        @router.get("/app/auth/{app_key}")
        async def app_auth(
            app_key: str,
            broker: OAuthTokenBroker = Depends(get_broker)
        ):
            """
            Start an authorization for the app.

            Returns:
                RedirectResponse: Redirect to the platform's authorization page
            """
            try:
                auth_request = await broker.request_auth_url(app_key)
            except CredentialError as e:
                raise credential_error(e)
            except Exception as e:
                logger.error(f"Error initiating Twitter OAuth for app {app_key}: {str(e)}")
                raise HTTPException(
                    status_code=500,
                    detail="Error initiating Twitter authorization"
                )

            return RedirectResponse(auth_request.url)

        @router.get("/app/{app_key}/users")
        async def list_app_users(
            app_key: str,
            registry: CredentialRegistry = Depends(get_registry)
        ) -> List[str]:
            """List the OAuth tokens of the users who authorized the app."""
            try:
                return await registry.list_authorized_users(app_key)
            except CredentialError as e:
                raise credential_error(e)

        @router.post("/app/{app_key}/{oauth_token}/tweet")
        async def post_app_user_tweet(
            app_key: str,
            oauth_token: str,
            request: Request,
            registry: CredentialRegistry = Depends(get_registry)
        ) -> Dict[str, str]:
            """Post a tweet on behalf of one of the app's authorized users."""
            tweet = await read_body(request, TweetRequest)

            try:
                client = await registry.create_client(app_key, oauth_token)
                tweet_id = client.create_tweet(tweet.text)
            except CredentialError as e:
                raise credential_error(e)

            return {"tweet_id": tweet_id}

        return router
