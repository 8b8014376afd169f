"""
Password hashing helpers (Argon2id via argon2-cffi).

Hashing is CPU-bound, so every hash/verify call runs under a bounded
semaphore sized by PASSWORD_HASH_CONCURRENCY.
"""
from __future__ import annotations

import threading
import uuid

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from utils.exceptions import ValidationError

ph = PasswordHasher()
_slots = threading.BoundedSemaphore(4)


def configure_hasher(time_cost: int | None = None, memory_cost: int | None = None,
                     parallelism: int | None = None, max_concurrency: int | None = None) -> None:
    """Install hashing parameters from app configuration."""
    global ph, _slots
    defaults = PasswordHasher()
    ph = PasswordHasher(
        time_cost=time_cost or defaults.time_cost,
        memory_cost=memory_cost or defaults.memory_cost,
        parallelism=parallelism or defaults.parallelism,
    )
    if max_concurrency:
        _slots = threading.BoundedSemaphore(max_concurrency)


def _require(password) -> str:
    if password is None or not isinstance(password, str) or password == "":
        raise ValidationError("Password is required")
    return password


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    _require(password)
    with _slots:
        return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password against a stored argon2 hash
    """
    _require(password)
    if not password_hash:
        return False
    with _slots:
        try:
            return ph.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            # VerifyMismatchError is a VerificationError
            return False


def needs_rehash(password_hash: str) -> bool:
    try:
        return ph.check_needs_rehash(password_hash)
    except InvalidHashError:
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())
