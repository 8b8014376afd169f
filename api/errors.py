from flask import request
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError
import logging

from api.responses import error_response
from models import storage
from models.schemas.common import flatten_messages
from utils.exceptions import AppError, ConfigError

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    # Classified application errors: the kind decides the status
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status >= 500:
            logger.error("%s on %s %s: %s", err.__class__.__name__, request.method, request.path,
                         err.message, exc_info=err)
        else:
            logger.info("%s on %s %s: %s", err.__class__.__name__, request.method, request.path, err.message)
        if isinstance(err, ConfigError):
            # configuration details stay in the log
            return error_response(AppError.default_message, err.status)
        return error_response(err.message, err.status, err.errors)

    # Marshmallow validation errors that escaped a service
    @app.errorhandler(SchemaValidationError)
    def handle_validation_error(err: SchemaValidationError):
        return error_response("Invalid input", 400, flatten_messages(err.messages))

    # Integrity errors (unique constraints) that escaped a service
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        storage.rollback()
        logger.warning("Integrity error on %s %s", request.method, request.path)
        return error_response("Unique constraint violated", 409)

    # Werkzeug HTTPExceptions map to their status codes (404 route, 405, 413, ...)
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description or err.name, err.code or 400)

    # 500 Internal Error (catch-all); never leak the exception text
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.error("Unhandled exception on %s %s", request.method, request.path, exc_info=err)
        return error_response("An unexpected error occurred", 500)
