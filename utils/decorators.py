from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import current_app, g, request

from models import session_store
from utils.exceptions import ConfigError, ExpiredTokenError, InternalError, InvalidTokenError, UnauthorizedError
from utils.tokens import TokenSettings, verify_access_token

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def token_settings() -> TokenSettings:
    """TokenSettings for the running app, built from its config."""
    return TokenSettings.from_config(current_app.config)


def extract_access_token() -> Optional[str]:
    """Access token from the cookie, else from `Authorization: Bearer <token>`."""
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    auth = request.headers.get("Authorization", "")
    scheme, _, credentials = auth.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def authenticate_request():
    """
    Verify the request's access token and load its user into flask.g.

    Sets g.current_user (CurrentUser projection, no secrets).
    Raises UnauthorizedError for a missing, invalid or expired token, or when
    the user no longer exists. There is no automatic refresh here.
    """
    token = extract_access_token()
    if not token:
        logger.warning("Unauthenticated request to %s", request.path)
        raise UnauthorizedError("Unauthorized request")

    try:
        claims = verify_access_token(token, token_settings())
    except ExpiredTokenError:
        logger.info("Expired access token on %s", request.path)
        raise UnauthorizedError("Access token has expired")
    except InvalidTokenError as exc:
        logger.warning("Invalid access token on %s: %s", request.path, exc.message)
        raise UnauthorizedError("Invalid access token")
    except ConfigError:
        logger.exception("Cannot verify access tokens")
        raise InternalError()

    user = session_store.load_identity(claims.user_id)
    if user is None:
        logger.warning("Access token for missing user %s", claims.user_id)
        raise UnauthorizedError("Invalid access token")

    g.current_user = user


def auth_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            authenticate_request()
            return fn(*args, **kwargs)

        return wrapper

    return decorator
