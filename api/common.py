"""Request helpers shared by the resource blueprints."""
from __future__ import annotations

from typing import Tuple

from flask import request, abort

from models import storage
from services.errors import NotFound, Unauthorized
from utils.decorators import current_user_id

MAX_LIMIT = 100


def parse_limit_offset(default_limit: int = 20) -> Tuple[int, int]:
    try:
        limit = int(request.args.get("limit", str(default_limit)))
        offset = int(request.args.get("offset", "0"))
    except ValueError:
        abort(400, description="limit and offset must be integers")
    limit = max(1, min(limit, MAX_LIMIT))
    offset = max(offset, 0)
    return limit, offset


def get_or_404(cls, obj_id: str, label: str | None = None):
    obj = storage.get(cls, obj_id)
    if obj is None:
        raise NotFound(f"{label or cls.__name__} not found")
    return obj


def ensure_owner(owner_id: str, action: str = "modify this resource"):
    """Ownership check done by handlers after the gate has run."""
    if owner_id != current_user_id():
        raise Unauthorized(f"User is not authorized to {action}")
