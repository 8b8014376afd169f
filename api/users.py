"""
Users blueprint (mounted at /api/v1/users):
- POST  /register
- POST  /login
- POST  /logout            (auth required)
- POST  /refresh-token
- POST  /change-password   (auth required)
- GET   /current-user      (auth required)
- PATCH /update-account    (auth required)

Access and refresh tokens are returned in the body and also set as
SameSite=Strict cookies. The flows themselves live in services.auth.
"""
from __future__ import annotations

from flask import Blueprint, g, request

from api.responses import api_response, clear_auth_cookies, set_auth_cookies
from models.schemas.user import TokenPairOutSchema, UserOutSchema
from services import auth as auth_service
from utils.decorators import REFRESH_COOKIE, auth_required, token_settings

bp = Blueprint("users", __name__)

user_out_schema = UserOutSchema()
token_pair_out_schema = TokenPairOutSchema()


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@bp.post("/register")
def register():
    """
    Register a new user.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, fullname, password]
          properties:
            email: { type: string }
            fullname: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      409:
        description: Email already registered
    """
    user = auth_service.register(_json_body())
    return api_response(user_out_schema.dump(user), "User registered.", 201)


@bp.post("/login")
def login():
    """
    Login: returns the user, an access token and a refresh token
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (sets accessToken and refreshToken cookies)
      401:
        description: Invalid credentials
      404:
        description: Unknown email
    """
    result = auth_service.login(_json_body(), token_settings())
    data = {"user": user_out_schema.dump(result.user), **token_pair_out_schema.dump(result.tokens._asdict())}
    response, status = api_response(data, "User logged-in.", 200)
    return set_auth_cookies(response, result.tokens), status


@bp.post("/logout")
@auth_required()
def logout():
    """
    Logout: forgets the stored refresh token and clears both cookies
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    auth_service.logout(g.current_user.id)
    response, status = api_response({}, "User logged-out.", 200)
    return clear_auth_cookies(response), status


@bp.post("/refresh-token")
def refresh_token():
    """
    Exchange a refresh token (cookie or body) for a new pair (rotation)
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: OK (rotated cookies)
      401:
        description: Missing, invalid, expired or already used refresh token
      409:
        description: Token was rotated concurrently by another request
    """
    presented = request.cookies.get(REFRESH_COOKIE) or _json_body().get("refreshToken")
    tokens = auth_service.refresh(presented, token_settings())
    response, status = api_response(token_pair_out_schema.dump(tokens._asdict()), "Access token refreshed.", 200)
    return set_auth_cookies(response, tokens), status


@bp.post("/change-password")
@auth_required()
def change_password():
    """
    Change the current user's password
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             oldPassword: { type: string }
             newPassword: { type: string }
             confirmPassword: { type: string }
    responses:
      200:
        description: OK
      400:
        description: Validation error
      401:
        description: Wrong current password
    """
    auth_service.change_password(g.current_user.id, _json_body())
    return api_response({}, "Password changed.", 200)


@bp.get("/current-user")
@auth_required()
def current_user():
    """
    Get the authenticated user
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return api_response(user_out_schema.dump(g.current_user), "Current user fetched.", 200)


@bp.patch("/update-account")
@auth_required()
def update_account():
    """
    Update email and/or full name
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             fullname: { type: string }
    responses:
      200:
        description: OK
      400:
        description: Nothing to change or invalid value
      409:
        description: Email already registered
    """
    user = auth_service.update_account(g.current_user.id, _json_body())
    return api_response(user_out_schema.dump(user), "Account details updated.", 200)
