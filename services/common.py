"""Helpers shared by the service modules."""
from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Mapping, Optional

from marshmallow import Schema, ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError

from models import storage
from models.schemas.common import flatten_messages
from utils.exceptions import InternalError, ValidationError

logger = logging.getLogger(__name__)


def db_guard(fn):
    """Reclassify any database error that escapes a service call as InternalError."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except SQLAlchemyError:
            logger.exception("Database failure during %s", fn.__name__)
            storage.rollback()
            raise InternalError()

    return wrapper


def load_payload(schema: Schema, payload: Optional[Mapping[str, Any]], message: str) -> dict:
    """Run a marshmallow schema and convert its errors into our ValidationError."""
    try:
        return schema.load(payload if payload is not None else {})
    except SchemaValidationError as err:
        raise ValidationError(message, errors=flatten_messages(err.messages))
