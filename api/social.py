"""
Likes and comments on any likeable resource:
    /<resource_type>/<resource_id>/like
    /<resource_type>/<resource_id>/likes
    /<resource_type>/<resource_id>/comments
resource_type is one of posts, albums, photos, comments.
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify
from sqlalchemy.exc import IntegrityError

from api.common import get_or_404, ensure_owner
from models import storage
from models.comment import Comment
from models.like import Like
from models.schemas.common import RESOURCE_TYPES
from models.schemas.social import LikeOutSchema, CommentCreateSchema, CommentOutSchema
from services.errors import BadRequest
from utils.decorators import jwt_required, current_user_id

logger = logging.getLogger(__name__)

bp = Blueprint("social", __name__)

like_list_schema = LikeOutSchema(many=True)
comment_create_schema = CommentCreateSchema()
comment_out_schema = CommentOutSchema()
comment_list_schema = CommentOutSchema(many=True)


def _check_resource_type(resource_type: str) -> str:
    if resource_type not in RESOURCE_TYPES:
        raise BadRequest(f"Unsupported resource type. Allowed: {', '.join(RESOURCE_TYPES)}")
    return resource_type


def _find_like(session, user_id, resource_type, resource_id):
    return (
        session.query(Like)
        .filter(
            Like.user_id == user_id,
            Like.resource_type == resource_type,
            Like.resource_id == resource_id,
        )
        .first()
    )


@bp.post("/<resource_type>/<resource_id>/like")
@jwt_required()
def like_resource(resource_type: str, resource_id: str):
    """
    Like a resource (liking twice is a no-op)
    ---
    tags: [Likes]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: resource_type, type: string, required: true, enum: [posts, albums, photos, comments] }
      - { in: path, name: resource_id, type: string, required: true }
    responses:
      201: { description: Liked }
      400: { description: Unsupported resource type }
    """
    _check_resource_type(resource_type)
    session = storage.get_session()
    if _find_like(session, current_user_id(), resource_type, resource_id) is None:
        storage.new(Like(user_id=current_user_id(), resource_type=resource_type, resource_id=resource_id))
        try:
            storage.save()
        except IntegrityError:
            # A concurrent request inserted the same like
            logger.info("duplicate like on %s/%s ignored", resource_type, resource_id)
    return jsonify({"message": "Resource liked"}), 201


@bp.delete("/<resource_type>/<resource_id>/like")
@jwt_required()
def unlike_resource(resource_type: str, resource_id: str):
    """
    Remove my like from a resource
    ---
    tags: [Likes]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: resource_type, type: string, required: true }
      - { in: path, name: resource_id, type: string, required: true }
    responses:
      200: { description: Unliked }
    """
    _check_resource_type(resource_type)
    session = storage.get_session()
    like = _find_like(session, current_user_id(), resource_type, resource_id)
    if like is not None:
        like.delete()
        storage.save()
    return jsonify({"message": "Resource unliked"}), 200


@bp.get("/<resource_type>/<resource_id>/likes")
@jwt_required()
def get_likes(resource_type: str, resource_id: str):
    """
    Likes on a resource, newest first
    ---
    tags: [Likes]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: resource_type, type: string, required: true }
      - { in: path, name: resource_id, type: string, required: true }
    responses:
      200: { description: OK }
    """
    _check_resource_type(resource_type)
    session = storage.get_session()
    likes = (
        session.query(Like)
        .filter(Like.resource_type == resource_type, Like.resource_id == resource_id)
        .order_by(Like.created_at.desc())
        .all()
    )
    return jsonify({"data": like_list_schema.dump(likes), "meta": {"total": len(likes)}}), 200


@bp.post("/<resource_type>/<resource_id>/comments")
@jwt_required()
def create_comment(resource_type: str, resource_id: str):
    """
    Comment on a resource
    ---
    tags: [Comments]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: resource_type, type: string, required: true }
      - { in: path, name: resource_id, type: string, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [content]
          properties:
            content: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error }
    """
    _check_resource_type(resource_type)
    data = comment_create_schema.load(request.get_json(silent=True) or {})
    comment = Comment(
        user_id=current_user_id(),
        resource_type=resource_type,
        resource_id=resource_id,
        content=data["content"],
    )
    storage.new(comment)
    storage.save()
    return jsonify({"data": comment_out_schema.dump(comment)}), 201


@bp.get("/<resource_type>/<resource_id>/comments")
@jwt_required()
def get_comments(resource_type: str, resource_id: str):
    """
    Comments on a resource with their authors, newest first
    ---
    tags: [Comments]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: resource_type, type: string, required: true }
      - { in: path, name: resource_id, type: string, required: true }
    responses:
      200: { description: OK }
    """
    _check_resource_type(resource_type)
    session = storage.get_session()
    comments = (
        session.query(Comment)
        .filter(Comment.resource_type == resource_type, Comment.resource_id == resource_id)
        .order_by(Comment.created_at.desc())
        .all()
    )
    return jsonify({"data": comment_list_schema.dump(comments)}), 200


@bp.delete("/comments/<comment_id>")
@jwt_required()
def delete_comment(comment_id: str):
    """
    Delete a comment (author only)
    ---
    tags: [Comments]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: comment_id, type: string, required: true }
    responses:
      200: { description: Deleted }
      403: { description: Not the author }
      404: { description: Comment not found }
    """
    comment = get_or_404(Comment, comment_id, "Comment")
    ensure_owner(comment.user_id, "delete this comment")

    comment.delete()
    storage.save()
    return jsonify({"message": "Comment deleted"}), 200
