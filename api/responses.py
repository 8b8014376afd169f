from flask import current_app, jsonify

from utils.decorators import ACCESS_COOKIE, REFRESH_COOKIE


def api_response(data=None, message: str = "Success", status: int = 200):
    """Success envelope: {statusCode, data, message, success: true}."""
    payload = {
        "statusCode": status,
        "data": data if data is not None else {},
        "message": message,
        "success": status < 400,
    }
    return jsonify(payload), status


def error_response(message: str, status: int, errors: list | None = None):
    """Error envelope: {statusCode, message, success: false, errors}."""
    payload = {
        "statusCode": status,
        "message": message,
        "success": False,
        "errors": errors or [],
    }
    return jsonify(payload), status


def _cookie_options() -> dict:
    config = current_app.config
    return {
        "path": "/",
        "samesite": "Strict",
        "secure": config.get("AUTH_COOKIE_SECURE", False),
        "httponly": config.get("AUTH_COOKIE_HTTPONLY", True),
    }


def set_auth_cookies(response, tokens):
    options = _cookie_options()
    max_age = current_app.config.get("AUTH_COOKIE_MAX_AGE")
    response.set_cookie(ACCESS_COOKIE, tokens.access_token, max_age=max_age, **options)
    response.set_cookie(REFRESH_COOKIE, tokens.refresh_token, max_age=max_age, **options)
    return response


def clear_auth_cookies(response):
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response
