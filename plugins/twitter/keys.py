# plugins/twitter/keys.py
"""
Storage key scheme for Twitter credentials.

Keys must stay byte-for-byte compatible with data written by earlier
deployments:

    main:twitter:app:<appKey>:app_credentials
    main:twitter:app:<appKey>:authorized_user:<oauthToken>
    main:twitter:temporary_oauth_credentials:<oauthToken>

The app-registration flow uses a second namespace:

    fs:twitter:apps:<appKey>
    fs:twitter:oauth:tokens:temp:<token>
    fs:twitter:oauth:tokens:perma:<id>
"""

from typing import Optional

from errors import CredentialValidationError

SEPARATOR = ":"

MAIN_PREFIX = "main:twitter"
APPS_PREFIX = "fs:twitter"


def validate_segment(value, name: str) -> str:
    """
    Check that a value can be used as one segment of a storage key.

    Segments containing the separator are rejected.
    """
    if not isinstance(value, str) or not value:
        raise CredentialValidationError(f"{name} must be a non-empty string")
    if SEPARATOR in value:
        raise CredentialValidationError(f"{name} must not contain '{SEPARATOR}'")
    return value


def app_credentials_key(app_key: str) -> str:
    validate_segment(app_key, "appKey")
    return f"{MAIN_PREFIX}:app:{app_key}:app_credentials"


def authorized_user_key(app_key: str, oauth_token: Optional[str] = None) -> str:
    """
    Key of a persistent user credential record.

    Without a token this returns the per-app prefix used to list every
    authorized user of the app.
    """
    validate_segment(app_key, "appKey")
    key = f"{MAIN_PREFIX}:app:{app_key}:authorized_user"
    if oauth_token is not None:
        validate_segment(oauth_token, "oauthToken")
        key += f"{SEPARATOR}{oauth_token}"
    return key


def temporary_credentials_key(oauth_token: str) -> str:
    validate_segment(oauth_token, "oauthToken")
    return f"{MAIN_PREFIX}:temporary_oauth_credentials:{oauth_token}"


def temporary_credentials_prefix() -> str:
    return f"{MAIN_PREFIX}:temporary_oauth_credentials{SEPARATOR}"


def strip_prefix(key: str, prefix: str) -> str:
    """Remove ``prefix`` and the following separator from ``key``."""
    full_prefix = prefix if prefix.endswith(SEPARATOR) else prefix + SEPARATOR
    if key.startswith(full_prefix):
        return key[len(full_prefix):]
    return key


def app_tokens_key(app_key: str) -> str:
    validate_segment(app_key, "appKey")
    return f"{APPS_PREFIX}:apps:{app_key}"


def temp_oauth_tokens_key(token: str) -> str:
    validate_segment(token, "oauth_token")
    return f"{APPS_PREFIX}:oauth:tokens:temp:{token}"


def perma_oauth_tokens_key(token_id: str) -> str:
    validate_segment(token_id, "id")
    return f"{APPS_PREFIX}:oauth:tokens:perma:{token_id}"
