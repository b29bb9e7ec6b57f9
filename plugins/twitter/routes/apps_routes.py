# plugins/twitter/routes/apps_routes.py
"""
Twitter Apps Routes
===================

Routes for the app-registration flow, where permanent user tokens are stored
under a random identifier and tweets are posted by that identifier.

Routes (mounted under "/apps"):
- POST /add: Register an app
- GET  /auth/{app_key}: Redirect a user to the platform's authorization page
- GET  /auth/callback: Complete an authorization, returning the token identifier
- POST /tweet: Post a tweet with the tokens stored under an identifier
"""

import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse

from errors import CredentialError
from plugins import RoutePlugin
from plugins.twitter.apps import AppAuthFlow, save_app_tokens
from plugins.twitter.dependencies import get_app_auth_flow
from plugins.twitter.routes.validation import credential_error, read_body, validate_data
from plugins.twitter.schemas import AppTokens, AppTweetRequest, AuthParams

logger = logging.getLogger(__name__)


class TwitterAppsRoutes(RoutePlugin):
    """
    Plugin for the app-registration flow routes.

    Class Attributes:
        service_name (str): The unique identifier for this plugin
    """

    service_name = "apps"

    def get_router(self) -> APIRouter:
        router = APIRouter(tags=["twitter", "apps"])

        @router.post("/add")
        async def add_app(
            request: Request,
            flow: AppAuthFlow = Depends(get_app_auth_flow)
        ) -> bool:
            tokens = await read_body(request, AppTokens)

            try:
                save_app_tokens(flow.store, tokens)
            except CredentialError as e:
                raise credential_error(e)

            return True

        @router.get("/auth/callback")
        async def apps_auth_callback(
            oauth_token: str = Query(None),
            oauth_verifier: str = Query(None),
            flow: AppAuthFlow = Depends(get_app_auth_flow)
        ) -> str:
            params = validate_data(AuthParams, {
                "oauth_token": oauth_token,
                "oauth_verifier": oauth_verifier
            })

            try:
                return await flow.complete(params.oauth_token, params.oauth_verifier)
            except CredentialError as e:
                raise credential_error(e)

        @router.get("/auth/{app_key}")
        async def apps_auth(
            app_key: str,
            flow: AppAuthFlow = Depends(get_app_auth_flow)
        ):
            try:
                url = await flow.start(app_key)
            except CredentialError as e:
                raise credential_error(e)
            except Exception as e:
                logger.error(f"Error initiating Twitter OAuth for app {app_key}: {str(e)}")
                raise HTTPException(
                    status_code=500,
                    detail="Error initiating Twitter authorization"
                )

            return RedirectResponse(url)

        @router.post("/tweet")
        async def apps_tweet(
            request: Request,
            flow: AppAuthFlow = Depends(get_app_auth_flow)
        ) -> Dict[str, str]:
            tweet = await read_body(request, AppTweetRequest)

            try:
                tweet_id = await flow.post_tweet(tweet.id, tweet.text)
            except CredentialError as e:
                raise credential_error(e)

            return {"tweet_id": tweet_id}

        return router
