"""Shared test fixtures for the Notes API."""

from datetime import timedelta

import pytest

from api import create_app
from models import storage
from services import auth as auth_service
from utils.tokens import TokenSettings

ACCESS_SECRET = "test-access-secret-0123456789abcdef0123"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef012"

TEST_OVERRIDES = {
    "ACCESS_TOKEN_SECRET": ACCESS_SECRET,
    "REFRESH_TOKEN_SECRET": REFRESH_SECRET,
    "ACCESS_TOKEN_EXPIRES": timedelta(minutes=15),
    "REFRESH_TOKEN_EXPIRES": timedelta(days=7),
}

USER_PASSWORD = "pw123456"


@pytest.fixture
def app():
    """Fresh app on a fresh in-memory database for every test."""
    app = create_app("testing", overrides=TEST_OVERRIDES)
    yield app
    storage.close()


@pytest.fixture
def settings(app):
    return TokenSettings.from_config(app.config)


@pytest.fixture
def client(app):
    """Test client that does NOT keep cookies; tokens go in headers or bodies."""
    return app.test_client(use_cookies=False)


@pytest.fixture
def cookie_client(app):
    """Test client that stores and re-sends cookies like a browser."""
    return app.test_client()


@pytest.fixture
def user(app):
    """A registered user (CurrentUser projection)."""
    return auth_service.register(
        {"email": "a@x.com", "fullname": "A", "password": USER_PASSWORD}
    )


@pytest.fixture
def logged_in(user, settings):
    """LoginResult for the registered user."""
    return auth_service.login({"email": "a@x.com", "password": USER_PASSWORD}, settings)


@pytest.fixture
def auth_headers(logged_in):
    return {"Authorization": f"Bearer {logged_in.tokens.access_token}"}
