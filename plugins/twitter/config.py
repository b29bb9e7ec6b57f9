# plugins/twitter/config.py
"""
Configuration for Twitter plugin
"""

from typing import Optional

from pydantic_settings import BaseSettings
from functools import lru_cache

class TwitterSettings(BaseSettings):
    """
    Twitter-specific settings

    These settings can be configured via environment variables
    prefixed with TWITTER_, e.g., TWITTER_MAX_TWEET_LENGTH
    """
    # Tweet settings
    MAX_TWEET_LENGTH: int = 280

    # OAuth settings
    OAUTH_CALLBACK_URL: str = "http://localhost:8000/twitter/app/auth/callback"
    APPS_OAUTH_CALLBACK_URL: str = "http://localhost:8000/apps/auth/callback"
    SIGNIN_WITH_TWITTER: bool = False

    # Where to send the end user after a successful callback; the callback
    # answers with `true` when unset
    POST_AUTH_REDIRECT_URL: Optional[str] = None

    # Temporary request tokens never expire when unset
    TEMPORARY_TOKEN_TTL_SECONDS: Optional[int] = None

    class Config:
        env_prefix = "TWITTER_"
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_twitter_settings():
    """
    Get the Twitter settings, cached to avoid reloading
    """
    return TwitterSettings()
