"""
Friendship endpoints. A friendship is stored as two rows (one per direction)
written or removed in a single commit.
"""
from __future__ import annotations

from flask import Blueprint, jsonify
from sqlalchemy import and_, or_

from api.common import get_or_404, ensure_owner
from models import storage
from models.friend import FriendRequest, FriendRequestStatus, Friendship
from models.user import User
from models.schemas.friend import FriendRequestOutSchema
from models.schemas.user import UserPublicSchema
from services.errors import BadRequest
from utils.decorators import jwt_required, current_user_id

bp = Blueprint("friends", __name__)

request_out_schema = FriendRequestOutSchema()
request_list_out_schema = FriendRequestOutSchema(many=True)
user_public_list_schema = UserPublicSchema(many=True)


def _are_friends(session, user_id: str, other_id: str) -> bool:
    return (
        session.query(Friendship)
        .filter(Friendship.user_id == user_id, Friendship.friend_id == other_id)
        .first()
        is not None
    )


def _pending_request_for(request_id: str) -> FriendRequest:
    fr = get_or_404(FriendRequest, request_id, "Friend request")
    ensure_owner(fr.to_user_id, "answer this friend request")
    if fr.status != FriendRequestStatus.PENDING:
        raise BadRequest("Friend request is no longer pending")
    return fr


@bp.get("/users/<user_id>/friends")
@jwt_required()
def get_user_friends(user_id: str):
    """
    Friends of a user
    ---
    tags: [Friends]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, required: true }
    responses:
      200: { description: OK }
    """
    session = storage.get_session()
    friends = (
        session.query(User)
        .join(Friendship, Friendship.friend_id == User.id)
        .filter(Friendship.user_id == user_id)
        .order_by(User.name.asc())
        .all()
    )
    return jsonify({"data": user_public_list_schema.dump(friends)}), 200


@bp.get("/me/friend-requests")
@jwt_required()
def get_my_friend_requests():
    """
    Pending friend requests sent to me
    ---
    tags: [Friends]
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    session = storage.get_session()
    rows = (
        session.query(FriendRequest)
        .filter(
            FriendRequest.to_user_id == current_user_id(),
            FriendRequest.status == FriendRequestStatus.PENDING,
        )
        .order_by(FriendRequest.created_at.desc())
        .all()
    )
    return jsonify({"data": request_list_out_schema.dump(rows)}), 200


@bp.post("/users/<user_id>/friend-requests")
@jwt_required()
def send_friend_request(user_id: str):
    """
    Send a friend request to a user
    ---
    tags: [Friends]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, required: true }
    responses:
      201: { description: Created }
      400: { description: Self request, duplicate request or already friends }
      404: { description: Recipient not found }
    """
    me_id = current_user_id()
    get_or_404(User, user_id, "User")
    if user_id == me_id:
        raise BadRequest("Cannot send a friend request to yourself")

    session = storage.get_session()
    if _are_friends(session, me_id, user_id):
        raise BadRequest("Already friends")
    pending = (
        session.query(FriendRequest)
        .filter(
            FriendRequest.status == FriendRequestStatus.PENDING,
            or_(
                and_(FriendRequest.from_user_id == me_id, FriendRequest.to_user_id == user_id),
                and_(FriendRequest.from_user_id == user_id, FriendRequest.to_user_id == me_id),
            ),
        )
        .first()
    )
    if pending:
        raise BadRequest("A pending friend request already exists")

    fr = FriendRequest(from_user_id=me_id, to_user_id=user_id, status=FriendRequestStatus.PENDING)
    storage.new(fr)
    storage.save()
    return jsonify({"data": request_out_schema.dump(fr)}), 201


@bp.post("/friend-requests/<request_id>/accept")
@jwt_required()
def accept_friend_request(request_id: str):
    """
    Accept a friend request (recipient only)
    ---
    tags: [Friends]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: request_id, type: string, required: true }
    responses:
      200: { description: Accepted }
      403: { description: Not the recipient }
      404: { description: Not found }
    """
    fr = _pending_request_for(request_id)
    fr.status = FriendRequestStatus.ACCEPTED
    storage.new(fr)

    session = storage.get_session()
    for a, b in ((fr.from_user_id, fr.to_user_id), (fr.to_user_id, fr.from_user_id)):
        if not _are_friends(session, a, b):
            storage.new(Friendship(user_id=a, friend_id=b))
    storage.save()
    return jsonify({"message": "Friend request accepted"}), 200


@bp.post("/friend-requests/<request_id>/reject")
@jwt_required()
def reject_friend_request(request_id: str):
    """
    Reject a friend request (recipient only)
    ---
    tags: [Friends]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: request_id, type: string, required: true }
    responses:
      200: { description: Rejected }
    """
    fr = _pending_request_for(request_id)
    fr.status = FriendRequestStatus.REJECTED
    fr.save()
    return jsonify({"message": "Friend request rejected"}), 200


@bp.delete("/users/<user_id>/friends")
@jwt_required()
def unfriend_user(user_id: str):
    """
    Remove a friendship (both directions)
    ---
    tags: [Friends]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, required: true }
    responses:
      200: { description: Unfriended }
      404: { description: User not found }
    """
    me_id = current_user_id()
    get_or_404(User, user_id, "User")

    session = storage.get_session()
    session.query(Friendship).filter(
        or_(
            and_(Friendship.user_id == me_id, Friendship.friend_id == user_id),
            and_(Friendship.user_id == user_id, Friendship.friend_id == me_id),
        )
    ).delete(synchronize_session=False)
    storage.save()
    return jsonify({"message": "User unfriended"}), 200
