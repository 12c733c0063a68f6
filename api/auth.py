"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout

The flows themselves live in services.auth.AuthService:
- argon2 password hashing
- short-lived HS256 access tokens (stateless)
- long-lived opaque refresh tokens stored in the DB so they can be revoked
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, abort

from models.schemas.user import UserCreateSchema, UserOutSchema, UserLoginSchema, RefreshRequestSchema
from utils.decorators import bearer_token, get_auth_service

bp = Blueprint("auth", __name__)

user_create_schema = UserCreateSchema()
user_out_schema = UserOutSchema()
user_login_schema = UserLoginSchema()
refresh_schema = RefreshRequestSchema()


@bp.post("/register")
def register():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [name, email, password, birth_date]
          properties:
            name: { type: string }
            email: { type: string }
            password: { type: string, minLength: 8 }
            birth_date: { type: string, format: date }
    responses:
      201:
        description: Created (user without password)
      400:
        description: Duplicate email or validation error
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    user = get_auth_service().register(
        name=data["name"].strip(),
        email=data["email"],
        password=data["password"],
        birth_date=data["birth_date"],
    )
    return jsonify({"data": user_out_schema.dump(user)}), 201


@bp.post("/login")
def login():
    """
    Login: return access_token and refresh_token
    ---
    tags:
      - Auth
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
        description: OK (returns tokens)
      401:
        description: Invalid credentials
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    tokens = get_auth_service().login(data["email"], data["password"])
    return jsonify(
        {
            "access_token": tokens.access_token,
            "refresh_token": tokens.refresh_token,
            "token_type": "bearer",
        }
    ), 200


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new access token (the refresh token stays valid)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK (returns a new access token)
      401:
        description: Invalid, revoked or expired refresh token
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_schema.load(payload)

    access_token = get_auth_service().refresh(data["refresh_token"].strip())
    return jsonify({"access_token": access_token, "token_type": "bearer"}), 200


@bp.post("/logout")
def logout():
    """
    Logout: revoke the refresh token sent as `Authorization: Bearer <refresh_token>`
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out (also when already revoked)
      400:
        description: Missing or malformed Authorization header
    """
    token = bearer_token()
    if token is None:
        abort(400, description="Refresh token required")

    get_auth_service().logout(token)
    return jsonify({"message": "Logged out successfully"}), 200
