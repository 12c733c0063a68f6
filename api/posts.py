from __future__ import annotations

from flask import Blueprint, request, jsonify
from sqlalchemy import or_, and_, select

from api.common import parse_limit_offset, get_or_404, ensure_owner
from models import storage
from models.friend import Friendship
from models.post import Post, Privacy
from models.schemas.post import PostCreateSchema, PostUpdateSchema, PostOutSchema, FeedPostOutSchema
from utils.decorators import jwt_required, current_user_id

bp = Blueprint("posts", __name__)

post_create_schema = PostCreateSchema()
post_update_schema = PostUpdateSchema()
post_out_schema = PostOutSchema()
posts_out_schema = PostOutSchema(many=True)
feed_out_schema = FeedPostOutSchema(many=True)


@bp.post("/posts")
@jwt_required()
def create_post():
    """
    Create a post
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [content]
          properties:
            content: { type: string }
            privacy: { type: string, enum: [public, friends, only_me], default: public }
    responses:
      201:
        description: Created
      400:
        description: Validation error
    """
    data = post_create_schema.load(request.get_json(silent=True) or {})
    post = Post(user_id=current_user_id(), content=data["content"], privacy=data["privacy"])
    storage.new(post)
    storage.save()
    return jsonify({"data": post_out_schema.dump(post)}), 201


@bp.get("/feed")
@jwt_required()
def get_feed():
    """
    Posts by me and my friends, newest first
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - { in: query, name: limit, type: integer, default: 20 }
      - { in: query, name: offset, type: integer, default: 0 }
    responses:
      200:
        description: OK
    """
    me_id = current_user_id()
    limit, offset = parse_limit_offset()
    session = storage.get_session()

    friend_ids = select(Friendship.friend_id).where(Friendship.user_id == me_id)
    rows = (
        session.query(Post)
        .filter(
            or_(
                Post.user_id == me_id,
                and_(Post.user_id.in_(friend_ids), Post.privacy != Privacy.ONLY_ME),
            )
        )
        .order_by(Post.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return jsonify({"data": feed_out_schema.dump(rows)}), 200


@bp.get("/users/<user_id>/posts")
@jwt_required()
def get_user_posts(user_id: str):
    """
    Posts written by a user
    ---
    tags: [Posts]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, required: true }
      - { in: query, name: limit, type: integer, default: 20 }
      - { in: query, name: offset, type: integer, default: 0 }
    responses:
      200: { description: OK }
    """
    limit, offset = parse_limit_offset()
    session = storage.get_session()
    rows = (
        session.query(Post)
        .filter(Post.user_id == user_id)
        .order_by(Post.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return jsonify({"data": posts_out_schema.dump(rows)}), 200


@bp.get("/posts/<post_id>")
@jwt_required()
def get_post(post_id: str):
    """
    Get a single post
    ---
    tags: [Posts]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: Post not found }
    """
    post = get_or_404(Post, post_id, "Post")
    return jsonify({"data": post_out_schema.dump(post)}), 200


@bp.put("/posts/<post_id>")
@jwt_required()
def update_post(post_id: str):
    """
    Update a post (author only)
    ---
    tags: [Posts]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            content: { type: string }
            privacy: { type: string }
    responses:
      200: { description: Updated }
      403: { description: Not the author }
      404: { description: Post not found }
    """
    post = get_or_404(Post, post_id, "Post")
    ensure_owner(post.user_id, "update this post")

    data = post_update_schema.load(request.get_json(silent=True) or {})
    post.content = data["content"]
    post.privacy = data["privacy"]
    post.save()
    return jsonify({"data": post_out_schema.dump(post)}), 200


@bp.delete("/posts/<post_id>")
@jwt_required()
def delete_post(post_id: str):
    """
    Delete a post (author only)
    ---
    tags: [Posts]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: string, required: true }
    responses:
      200: { description: Deleted }
      403: { description: Not the author }
      404: { description: Post not found }
    """
    post = get_or_404(Post, post_id, "Post")
    ensure_owner(post.user_id, "delete this post")

    post.delete()
    storage.save()
    return jsonify({"message": "Post deleted"}), 200
