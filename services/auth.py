"""
Session flows: register, login, logout, refresh, change password and
account update.

Every flow raises only utils.exceptions errors. Database, hashing and signing
failures are caught here and reclassified, so nothing lower-level reaches
the HTTP layer.
"""
from __future__ import annotations

import hmac
import logging
from typing import Any, Mapping, NamedTuple, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import session_store, storage
from models.schemas.user import (
    ChangePasswordSchema,
    LoginSchema,
    RegisterSchema,
    UpdateAccountSchema,
)
from models.user import CurrentUser, User
from services.common import db_guard, load_payload
from utils.exceptions import (
    AppError,
    AuthenticationError,
    ConfigError,
    ConflictError,
    InternalError,
    InvalidTokenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from utils.security import hash_password, needs_rehash, verify_password
from utils.tokens import TokenPair, TokenSettings, issue_token_pair, verify_refresh_token

logger = logging.getLogger(__name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
change_password_schema = ChangePasswordSchema()
update_account_schema = UpdateAccountSchema()

TOKEN_FAILURE = "Something went wrong while generating access and refresh tokens"
PASSWORD_MIN_LENGTH = 8
PASSWORD_TOO_SHORT = f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"


class LoginResult(NamedTuple):
    user: CurrentUser
    tokens: TokenPair


def _email_taken(session, email: str, exclude_id: Optional[str] = None) -> bool:
    q = select(User.id).where(func.lower(User.email) == email.lower())
    if exclude_id:
        q = q.where(User.id != exclude_id)
    return session.execute(q).first() is not None


def _check_password_length(password: str, field: str) -> None:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(PASSWORD_TOO_SHORT, errors=[{"field": field, "messages": [PASSWORD_TOO_SHORT]}])


def _identity_or_fail(user_id: str) -> CurrentUser:
    user = session_store.load_identity(user_id)
    if user is None:
        raise UnauthorizedError("Invalid refresh token")
    return user


@db_guard
def register(payload: Optional[Mapping[str, Any]]) -> CurrentUser:
    data = load_payload(register_schema, payload, "All fields are required")
    _check_password_length(data["password"], "password")
    session = storage.get_session()

    if _email_taken(session, data["email"]):
        raise ConflictError("User with same email already exists")

    user = User(
        email=data["email"],
        fullname=data["fullname"],
        password_hash=hash_password(data["password"]),
        refresh_token=None,
    )
    try:
        storage.new(user)
        storage.save()
    except IntegrityError:
        # lost a race with a concurrent registration for the same email
        raise ConflictError("User with same email already exists")
    except SQLAlchemyError:
        logger.exception("Failed to create user")
        raise InternalError("Something went wrong while registering the user")

    created = session_store.load_identity(user.id)
    if created is None:
        raise InternalError("Something went wrong while registering the user")
    logger.info("Registered user %s", created.id)
    return created


@db_guard
def login(payload: Optional[Mapping[str, Any]], settings: TokenSettings) -> LoginResult:
    data = load_payload(login_schema, payload, "Email and password are required")
    session = storage.get_session()

    row = session.execute(
        select(User.id, User.password_hash).where(User.email == data["email"])
    ).first()
    if row is None:
        logger.warning("Login attempt for unknown email")
        raise NotFoundError("User with email does not exist")

    user_id, password_hash = row
    if not verify_password(data["password"], password_hash):
        logger.warning("Failed login attempt for user %s", user_id)
        raise AuthenticationError("Invalid user credentials")

    if needs_rehash(password_hash):
        try:
            session_store.set_password_hash(user_id, hash_password(data["password"]))
        except SQLAlchemyError:
            # the old hash still verifies; try again on the next login
            logger.warning("Could not upgrade password hash for user %s", user_id)

    try:
        tokens = issue_token_pair(user_id, settings)
        if not session_store.set_refresh_token(user_id, tokens.refresh_token):
            raise InternalError(TOKEN_FAILURE)
    except (AppError, SQLAlchemyError):
        logger.exception("Token generation failed for user %s", user_id)
        raise InternalError(TOKEN_FAILURE)

    user = session_store.load_identity(user_id)
    if user is None:
        raise InternalError(TOKEN_FAILURE)
    logger.info("User %s logged in", user_id)
    return LoginResult(user=user, tokens=tokens)


@db_guard
def logout(user_id: str) -> None:
    session_store.clear_refresh_token(user_id)
    logger.info("User %s logged out", user_id)


@db_guard
def refresh(presented_token: Optional[str], settings: TokenSettings) -> TokenPair:
    """
    Exchange a refresh token for a new pair, rotating the stored token.

    The presented token must verify against the refresh secret AND equal the
    token stored on the user row; the swap itself is a compare-and-swap so
    two concurrent refreshes of the same token cannot both win.
    """
    if not presented_token or not isinstance(presented_token, str):
        raise UnauthorizedError("Unauthorized request")

    try:
        claims = verify_refresh_token(presented_token, settings)
    except InvalidTokenError as exc:
        logger.warning("Rejected refresh token: %s", exc.message)
        raise UnauthorizedError(exc.message)
    except ConfigError:
        logger.exception("Cannot verify refresh tokens")
        raise InternalError()

    user = _identity_or_fail(claims.user_id)
    stored = session_store.get_refresh_token(user.id)
    if stored is None or not hmac.compare_digest(stored.encode(), presented_token.encode()):
        logger.warning("Stale refresh token presented for user %s", user.id)
        raise UnauthorizedError("Refresh token is expired or used")

    try:
        tokens = issue_token_pair(user.id, settings)
        rotated = session_store.rotate_refresh_token(user.id, presented_token, tokens.refresh_token)
    except (AppError, SQLAlchemyError):
        logger.exception("Token rotation failed for user %s", user.id)
        raise InternalError(TOKEN_FAILURE)

    if not rotated:
        logger.warning("Concurrent refresh lost the rotation race for user %s", user.id)
        raise ConflictError("Refresh token was already rotated by another request")
    logger.info("Rotated refresh token for user %s", user.id)
    return tokens


@db_guard
def change_password(user_id: str, payload: Optional[Mapping[str, Any]]) -> None:
    data = load_payload(change_password_schema, payload, "All password fields are required")

    current_hash = session_store.get_password_hash(user_id)
    if current_hash is None:
        raise UnauthorizedError("Invalid access token")
    if not verify_password(data["old_password"], current_hash):
        logger.warning("Wrong current password on change for user %s", user_id)
        raise AuthenticationError("Incorrect password")
    _check_password_length(data["new_password"], "newPassword")
    if data["new_password"] == data["old_password"]:
        raise ValidationError("New password is same as old password")
    if data["new_password"] != data["confirm_password"]:
        raise ValidationError("Passwords do not match")

    try:
        session_store.set_password_hash(user_id, hash_password(data["new_password"]))
    except SQLAlchemyError:
        logger.exception("Failed to store new password for user %s", user_id)
        raise InternalError()
    logger.info("Password changed for user %s", user_id)


@db_guard
def update_account(user_id: str, payload: Optional[Mapping[str, Any]]) -> CurrentUser:
    data = load_payload(update_account_schema, payload, "Invalid account details")
    changes = {key: value for key, value in data.items() if value is not None}
    if not changes:
        raise ValidationError("Either full name or email is required")

    session = storage.get_session()
    user = storage.get(User, user_id)
    if user is None:
        raise UnauthorizedError("Invalid access token")

    if "email" in changes and _email_taken(session, changes["email"], exclude_id=user_id):
        raise ConflictError("User with same email already exists")

    for key, value in changes.items():
        setattr(user, key, value)
    try:
        storage.new(user)
        storage.save()
    except IntegrityError:
        raise ConflictError("User with same email already exists")
    except SQLAlchemyError:
        logger.exception("Failed to update account for user %s", user_id)
        raise InternalError()

    return session_store.load_identity(user_id)
