"""
JWT access/refresh token helpers (PyJWT, HS256 by default).

- Access tokens: short-lived, never stored server-side
- Refresh tokens: long-lived, signed with a distinct secret; the copy stored on
  the user row is the only one that counts
- Every call takes an explicit TokenSettings; nothing here reads app config
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, NamedTuple, Optional

import jwt

from utils.exceptions import ConfigError, ExpiredTokenError, InvalidTokenError, ValidationError
from utils.security import generate_jti

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class TokenSettings:
    access_secret: Optional[str]
    refresh_secret: Optional[str]
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=7)
    algorithm: str = "HS256"
    issuer: str = "notes-api"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TokenSettings":
        """Build settings from a Flask config (or any mapping)."""
        access_secret = config.get("ACCESS_TOKEN_SECRET") or None
        refresh_secret = config.get("REFRESH_TOKEN_SECRET") or None
        if access_secret and access_secret == refresh_secret:
            raise ConfigError("Access and refresh tokens must use different secrets")
        return cls(
            access_secret=access_secret,
            refresh_secret=refresh_secret,
            access_ttl=config.get("ACCESS_TOKEN_EXPIRES", cls.access_ttl),
            refresh_ttl=config.get("REFRESH_TOKEN_EXPIRES", cls.refresh_ttl),
            algorithm=config.get("JWT_ALGORITHM", cls.algorithm),
            issuer=config.get("JWT_ISSUER", cls.issuer),
        )


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    token_type: str
    jti: Optional[str]
    issued_at: datetime
    expires_at: datetime


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _sign(user_id: str, token_type: str, secret: Optional[str], ttl: timedelta,
          settings: TokenSettings, now: Optional[datetime]) -> str:
    if not secret:
        raise ConfigError(f"{token_type} token signing secret is not configured")
    if not user_id:
        raise ValidationError("Cannot issue a token without a user id")
    issued = now or _now()
    payload = {
        "iss": settings.issuer,
        "sub": str(user_id),
        "iat": int(issued.timestamp()),
        "exp": int((issued + ttl).timestamp()),
        "type": token_type,
        "jti": generate_jti(),
    }
    return jwt.encode(payload, secret, algorithm=settings.algorithm)


def issue_access_token(user_id: str, settings: TokenSettings, now: Optional[datetime] = None) -> str:
    return _sign(user_id, ACCESS, settings.access_secret, settings.access_ttl, settings, now)


def issue_refresh_token(user_id: str, settings: TokenSettings, now: Optional[datetime] = None) -> str:
    return _sign(user_id, REFRESH, settings.refresh_secret, settings.refresh_ttl, settings, now)


def issue_token_pair(user_id: str, settings: TokenSettings) -> TokenPair:
    """Mint a fresh access/refresh pair. Persisting the refresh token is the caller's job."""
    return TokenPair(
        access_token=issue_access_token(user_id, settings),
        refresh_token=issue_refresh_token(user_id, settings),
    )


def verify_token(token: str, secret: Optional[str], expected_type: str,
                 algorithm: str = "HS256", issuer: Optional[str] = None) -> TokenClaims:
    """
    Decode and validate a JWT.

    Raises ExpiredTokenError when the token is recognized but past expiry and
    InvalidTokenError for a bad signature, malformed token, missing claims or a
    token of the wrong type.
    """
    if not secret:
        raise ConfigError(f"{expected_type} token signing secret is not configured")
    if not token or not isinstance(token, str):
        raise InvalidTokenError("Token is missing")
    options = {"require": ["exp", "iat", "sub"]}
    try:
        decoded = jwt.decode(token, secret, algorithms=[algorithm], issuer=issuer, options=options)
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError("Token has expired")
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError(f"Invalid token: {exc}")

    if decoded.get("type") != expected_type:
        raise InvalidTokenError("Wrong token type")
    return TokenClaims(
        user_id=decoded["sub"],
        token_type=decoded["type"],
        jti=decoded.get("jti"),
        issued_at=datetime.fromtimestamp(decoded["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(decoded["exp"], tz=timezone.utc),
    )


def verify_access_token(token: str, settings: TokenSettings) -> TokenClaims:
    return verify_token(token, settings.access_secret, ACCESS, settings.algorithm, settings.issuer)


def verify_refresh_token(token: str, settings: TokenSettings) -> TokenClaims:
    return verify_token(token, settings.refresh_secret, REFRESH, settings.algorithm, settings.issuer)
