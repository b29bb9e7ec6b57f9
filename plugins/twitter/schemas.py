# plugins/twitter/schemas.py
"""
Schemas for Twitter credential records and requests.

Stored records keep the camelCase field names used by existing data
(``appKey``, ``accessTokenSecret``...), so every model accepts both the alias
and the Python field name, and is written back with ``to_record()``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from plugins.twitter.config import get_twitter_settings


class StoredRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


#
# Credential records
#

class TwitterAppCredentials(StoredRecord):
    """Long-lived API credentials of a registered app."""
    app_key: str = Field(alias="appKey", min_length=1)
    app_secret: str = Field(alias="appSecret", min_length=1)


class FullCredentials(StoredRecord):
    """App credentials optionally merged with a user's access token pair."""
    app_key: str = Field(alias="appKey", min_length=1)
    app_secret: str = Field(alias="appSecret", min_length=1)
    access_token: Optional[str] = Field(default=None, alias="accessToken")
    access_token_secret: Optional[str] = Field(default=None, alias="accessTokenSecret")


class ExchangedTokens(StoredRecord):
    access_token: str = Field(alias="accessToken", min_length=1)
    access_token_secret: str = Field(alias="accessTokenSecret", min_length=1)


class TemporaryOAuthCredentials(StoredRecord):
    """
    OAuth request token issued while a user is sent through the platform's
    authorization page.

    ``exchange`` is only set between a successful token exchange and the
    removal of the record.
    """
    access_token: str = Field(alias="accessToken", min_length=1)
    access_token_secret: str = Field(alias="accessTokenSecret", min_length=1)
    app_key: str = Field(alias="appKey", min_length=1)
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    exchange: Optional[ExchangedTokens] = None

    @field_validator("created_at")
    @classmethod
    def to_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Timestamps are compared against naive UTC clocks
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class PersistentOAuthCredentials(StoredRecord):
    """Long-lived access token pair of a user who authorized an app."""
    access_token: str = Field(alias="accessToken", min_length=1)
    access_token_secret: str = Field(alias="accessTokenSecret", min_length=1)
    app_key: Optional[str] = Field(default=None, alias="appKey")


#
# App-registration flow records
#

class AppTokens(StoredRecord):
    app_key: str = Field(alias="appKey", min_length=1)
    app_secret: str = Field(alias="appSecret", min_length=1)


class TempOAuthTokens(StoredRecord):
    oauth_token: str = Field(min_length=1)
    oauth_token_secret: str = Field(min_length=1)
    app_key: str = Field(alias="appKey", min_length=1)


class PermaTokens(StoredRecord):
    access_token: str = Field(min_length=1)
    access_secret: str = Field(min_length=1)
    app_key: str = Field(min_length=1)


#
# Requests and results
#

class AuthParams(BaseModel):
    oauth_token: str = Field(min_length=1)
    oauth_verifier: str = Field(min_length=1)


class TweetRequest(BaseModel):
    text: str = Field(min_length=1)

    @field_validator("text")
    @classmethod
    def check_length(cls, value: str) -> str:
        max_length = get_twitter_settings().MAX_TWEET_LENGTH
        if len(value) > max_length:
            raise ValueError(f"Tweet exceeds maximum length of {max_length} characters")
        return value


class AppTweetRequest(TweetRequest):
    id: str = Field(min_length=1)


class AuthorizationRequest(BaseModel):
    """Result of requesting an authorization URL for an app."""
    url: str
    token: str
    token_secret: str
