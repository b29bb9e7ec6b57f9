"""
Shared pytest fixtures and configuration
"""

import os
import sys
from pathlib import Path
from typing import List, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Add the project root to Python path to make imports work
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before any settings are loaded
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["STORE_BACKEND"] = "database"
os.environ["TWITTER_OAUTH_CALLBACK_URL"] = "http://testserver/twitter/app/auth/callback"
os.environ["TWITTER_APPS_OAUTH_CALLBACK_URL"] = "http://testserver/apps/auth/callback"

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
import models  # noqa: F401
from plugins.twitter.client import AuthLink, LoginResult
from storage import DatabaseKeyValueStore, InMemoryKeyValueStore

# Create in-memory SQLite database for testing
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeTwitterClient:
    """Stand-in for TwitterAppClient that never touches the network."""

    def __init__(self, factory, credentials):
        self.factory = factory
        self.credentials = credentials
        self.auth_type = "user" if credentials.access_token else "app"

    def generate_auth_link(self, callback_url):
        self.factory.calls.append(("generate_auth_link", self.credentials, callback_url))
        if self.factory.auth_link_error:
            raise self.factory.auth_link_error

        token = self.factory.next_request_token()
        return AuthLink(
            url=f"https://api.twitter.com/oauth/authorize?oauth_token={token}",
            oauth_token=token,
            oauth_token_secret=f"{token}-secret"
        )

    def login(self, verifier):
        self.factory.calls.append(("login", self.credentials, verifier))
        if self.factory.login_error:
            raise self.factory.login_error

        return LoginResult(
            access_token=f"access-{self.credentials.access_token}",
            access_secret=f"access-secret-{self.credentials.access_token}"
        )

    def create_tweet(self, text):
        self.factory.calls.append(("create_tweet", self.credentials, text))
        if self.factory.tweet_error:
            raise self.factory.tweet_error
        return "1234567890"


class FakeClientFactory:
    """
    Client factory handing out FakeTwitterClient instances.

    Request tokens are taken from `request_tokens` first, then numbered
    request-token-1, request-token-2...
    """

    def __init__(self):
        self.calls = []
        self.request_tokens: List[str] = []
        self.auth_link_error: Optional[Exception] = None
        self.login_error: Optional[Exception] = None
        self.tweet_error: Optional[Exception] = None
        self._counter = 0

    def __call__(self, credentials):
        return FakeTwitterClient(self, credentials)

    def next_request_token(self):
        if self.request_tokens:
            return self.request_tokens.pop(0)
        self._counter += 1
        return f"request-token-{self._counter}"

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture(scope="function")
def test_db():
    """
    Create all tables in the test database and provide a new session for testing.
    Tear down the tables after the test is complete.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def store(test_db):
    """Database-backed key-value store on the test database."""
    return DatabaseKeyValueStore(test_db)


@pytest.fixture(scope="function")
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture(scope="function")
def fake_client_factory():
    return FakeClientFactory()


@pytest.fixture(scope="function")
def app(test_db, fake_client_factory) -> FastAPI:
    """
    Create a FastAPI app for testing with DB and Twitter client overrides.
    """
    from main import app as main_app
    from plugins.twitter.dependencies import get_client_factory

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    main_app.dependency_overrides[get_db] = override_get_db
    main_app.dependency_overrides[get_client_factory] = lambda: fake_client_factory

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(app):
    """Create a test client for the FastAPI app."""
    return TestClient(app)
