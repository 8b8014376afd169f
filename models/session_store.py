"""
Session store: narrow, single-row reads and updates on the user record.

Each writer is one UPDATE statement touching exactly one column, so it is
atomic per user without a process-wide lock and never runs the record
through a validating save path.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from models import storage
from models.user import IDENTITY_COLUMNS, CurrentUser, User


def _execute_update(stmt) -> int:
    session = storage.get_session()
    try:
        result = session.execute(stmt)
        storage.save()
    except SQLAlchemyError:
        storage.rollback()
        raise
    return result.rowcount


def set_refresh_token(user_id: str, token: str) -> bool:
    """Overwrite the user's refresh token. Returns False if the user does not exist."""
    stmt = update(User).where(User.id == user_id).values(refresh_token=token)
    return _execute_update(stmt) == 1


def rotate_refresh_token(user_id: str, presented: str, replacement: str) -> bool:
    """Compare-and-swap: store replacement only if presented is still the stored token."""
    stmt = (
        update(User)
        .where(User.id == user_id, User.refresh_token == presented)
        .values(refresh_token=replacement)
    )
    return _execute_update(stmt) == 1


def clear_refresh_token(user_id: str) -> None:
    stmt = update(User).where(User.id == user_id).values(refresh_token=None)
    _execute_update(stmt)


def get_refresh_token(user_id: str) -> Optional[str]:
    session = storage.get_session()
    return session.execute(select(User.refresh_token).where(User.id == user_id)).scalar_one_or_none()


def set_password_hash(user_id: str, password_hash: str) -> bool:
    stmt = update(User).where(User.id == user_id).values(password_hash=password_hash)
    return _execute_update(stmt) == 1


def get_password_hash(user_id: str) -> Optional[str]:
    session = storage.get_session()
    return session.execute(select(User.password_hash).where(User.id == user_id)).scalar_one_or_none()


def load_identity(user_id: str) -> Optional[CurrentUser]:
    """Load a user without ever selecting password_hash or refresh_token."""
    if not user_id:
        return None
    session = storage.get_session()
    row = session.execute(select(*IDENTITY_COLUMNS).where(User.id == user_id)).first()
    if row is None:
        return None
    return CurrentUser(*row)
