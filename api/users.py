from __future__ import annotations

import logging
import os
import secrets
import time

from flask import Blueprint, request, jsonify, abort, current_app, send_from_directory, url_for
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from werkzeug.utils import secure_filename

from api.common import parse_limit_offset, get_or_404
from models import storage
from models.user import User
from models.schemas.user import UserOutSchema, UserPublicSchema, UserUpdateSchema
from services.errors import DuplicateEmail
from utils.decorators import jwt_required, current_user_id

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
PROFILE_PICTURE_DIR = "profile-pictures"

user_out_schema = UserOutSchema()
user_public_schema = UserPublicSchema()
user_public_list_schema = UserPublicSchema(many=True)
user_update_schema = UserUpdateSchema()


def _escape_like(value: str) -> str:
    """Make % and _ in user input match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@bp.get("/users/search")
@jwt_required()
def search_users():
    """
    Search users by name or email (case-insensitive substring)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: query, name: q, type: string }
      - { in: query, name: limit, type: integer, default: 20 }
      - { in: query, name: offset, type: integer, default: 0 }
    responses:
      200: { description: OK }
    """
    q = (request.args.get("q") or "").strip()
    limit, offset = parse_limit_offset()

    session = storage.get_session()
    pattern = f"%{_escape_like(q)}%"
    rows = (
        session.query(User)
        .filter(or_(User.name.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\")))
        .order_by(User.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return jsonify({"data": user_public_list_schema.dump(rows)}), 200


@bp.get("/users/<user_id>")
@jwt_required()
def get_user_profile(user_id: str):
    """
    Public profile of a user
    ---
    tags: [Users]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: User not found }
    """
    user = get_or_404(User, user_id, "User")
    return jsonify({"data": user_public_schema.dump(user)}), 200


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current user info
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
    user = get_or_404(User, current_user_id(), "User")
    return jsonify({"data": user_out_schema.dump(user)}), 200


def _update_me(partial: bool):
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload, partial=partial)

    user = get_or_404(User, current_user_id(), "User")
    if "email" in data and data["email"] != user.email:
        session = storage.get_session()
        if session.query(User).filter(User.email == data["email"]).first():
            raise DuplicateEmail()
        user.email = data["email"]
    if "name" in data:
        user.name = data["name"].strip()
    try:
        user.save()
    except IntegrityError:
        # Another account took the email after the check above
        raise DuplicateEmail()
    return jsonify({"data": user_out_schema.dump(user)}), 200


@bp.put("/me")
@jwt_required()
def update_me():
    """
    Replace name and email of the current user
    ---
    tags: [Users]
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [name, email]
          properties:
            name: { type: string }
            email: { type: string }
    responses:
      200: { description: Updated }
      400: { description: Validation error or email already in use }
    """
    return _update_me(partial=False)


@bp.patch("/me")
@jwt_required()
def partial_update_me():
    """
    Update name and/or email of the current user
    ---
    tags: [Users]
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            name: { type: string }
            email: { type: string }
    responses:
      200: { description: Updated }
    """
    return _update_me(partial=True)


def _unique_filename(original: str) -> str:
    ext = os.path.splitext(secure_filename(original or ""))[1].lower()
    return f"{time.time_ns()}_{secrets.token_hex(4)}{ext}"


@bp.post("/me/profile-picture")
@jwt_required()
def upload_profile_picture():
    """
    Upload a profile picture (multipart field `profile_picture`)
    ---
    tags: [Users]
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - { in: formData, name: profile_picture, type: file, required: true }
    responses:
      200: { description: Uploaded }
      400: { description: Missing file or not an image }
    """
    file = request.files.get("profile_picture")
    if file is None:
        abort(400, description="Unable to get profile picture from form")
    if file.mimetype not in ALLOWED_IMAGE_TYPES:
        abort(400, description="Invalid file type. Only images are allowed")

    user = get_or_404(User, current_user_id(), "User")

    folder = os.path.join(current_app.config["UPLOAD_FOLDER"], PROFILE_PICTURE_DIR)
    os.makedirs(folder, exist_ok=True)
    filename = _unique_filename(file.filename)
    path = os.path.join(folder, filename)
    file.save(path)

    user.profile_picture_url = url_for("users.uploaded_file", filename=f"{PROFILE_PICTURE_DIR}/{filename}")
    try:
        user.save()
    except Exception:
        # Don't leave an orphan file behind
        try:
            os.remove(path)
        except OSError:
            logger.warning("failed to remove uploaded file %s during cleanup", filename)
        raise

    return jsonify(
        {
            "message": "Profile picture uploaded successfully",
            "profile_picture_url": user.profile_picture_url,
        }
    ), 200


@bp.get("/uploads/<path:filename>")
def uploaded_file(filename: str):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
