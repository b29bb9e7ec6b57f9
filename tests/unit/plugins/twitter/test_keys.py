"""
Unit tests for the Twitter credential key scheme
"""

import pytest

from errors import CredentialValidationError
from plugins.twitter import keys

pytestmark = [pytest.mark.unit, pytest.mark.storage]


class TestMainNamespace:
    """Keys must match data written by earlier deployments"""

    def test_app_credentials_key(self):
        assert keys.app_credentials_key("k1") == "main:twitter:app:k1:app_credentials"

    def test_authorized_user_key(self):
        assert keys.authorized_user_key("k1", "token") == "main:twitter:app:k1:authorized_user:token"

    def test_authorized_user_prefix(self):
        assert keys.authorized_user_key("k1") == "main:twitter:app:k1:authorized_user"

    def test_temporary_credentials_key(self):
        assert keys.temporary_credentials_key("token") == "main:twitter:temporary_oauth_credentials:token"
        assert keys.temporary_credentials_prefix() == "main:twitter:temporary_oauth_credentials:"


class TestAppsNamespace:

    def test_keys(self):
        assert keys.app_tokens_key("k1") == "fs:twitter:apps:k1"
        assert keys.temp_oauth_tokens_key("token") == "fs:twitter:oauth:tokens:temp:token"
        assert keys.perma_oauth_tokens_key("abc") == "fs:twitter:oauth:tokens:perma:abc"


class TestSegmentValidation:

    @pytest.mark.parametrize("value", ["", None, "k1:authorized_user", 42])
    def test_invalid_app_key(self, value):
        with pytest.raises(CredentialValidationError):
            keys.app_credentials_key(value)

    def test_invalid_token(self):
        with pytest.raises(CredentialValidationError):
            keys.authorized_user_key("k1", "a:b")


class TestStripPrefix:

    def test_strip_prefix(self):
        prefix = keys.authorized_user_key("k1")
        assert keys.strip_prefix("main:twitter:app:k1:authorized_user:token", prefix) == "token"

    def test_strip_prefix_with_separator(self):
        assert keys.strip_prefix("a:b:c", "a:b:") == "c"

    def test_unrelated_key_is_unchanged(self):
        assert keys.strip_prefix("other:key", "a:b") == "other:key"
