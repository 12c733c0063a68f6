from __future__ import annotations
from functools import wraps
from flask import request, g, abort, current_app

from services.errors import ServiceError


def get_auth_service():
    """The AuthService built by create_app() for this application."""
    return current_app.extensions["auth_service"]


def bearer_token() -> str | None:
    """Token from an `Authorization: Bearer <token>` header, or None."""
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme != "Bearer" or not token.strip():
        return None
    return token.strip()


def jwt_required():
    """
    Gate for protected endpoints. Verifies the access token and stores the
    caller's user id in g.current_user_id. Rejections only say "missing" or
    "invalid", never which check failed.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not request.headers.get("Authorization"):
                abort(401, description="Missing authorization header")
            token = bearer_token()
            if token is None:
                abort(401, description="Invalid token")
            try:
                user_id = get_auth_service().verify_access_token(token)
            except ServiceError:
                abort(401, description="Invalid token")

            g.current_user_id = user_id
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def current_user_id() -> str:
    return g.current_user_id
