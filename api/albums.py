from __future__ import annotations

from flask import Blueprint, request, jsonify

from api.common import get_or_404, ensure_owner
from models import storage
from models.album import Album, Photo
from models.schemas.album import (
    AlbumCreateSchema,
    AlbumUpdateSchema,
    AlbumOutSchema,
    PhotoCreateSchema,
    PhotoOutSchema,
)
from utils.decorators import jwt_required, current_user_id

bp = Blueprint("albums", __name__)

create_schema = AlbumCreateSchema()
update_schema = AlbumUpdateSchema()
out_schema = AlbumOutSchema()
out_list_schema = AlbumOutSchema(many=True)
photo_create_schema = PhotoCreateSchema()
photo_out_schema = PhotoOutSchema()


@bp.post("/me/albums")
@jwt_required()
def create_album():
    """
    Create an album
    ---
    tags: [Albums]
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
          required: [name]
          properties:
            name: { type: string, maxLength: 255 }
            description: { type: string }
            privacy: { type: string, enum: [public, friends, only_me] }
    responses:
      201: { description: Created }
      400: { description: Validation error }
    """
    data = create_schema.load(request.get_json(silent=True) or {})
    album = Album(
        user_id=current_user_id(),
        name=data["name"].strip(),
        description=data.get("description"),
        privacy=data["privacy"],
    )
    storage.new(album)
    storage.save()
    return jsonify({"data": out_schema.dump(album)}), 201


@bp.get("/users/<user_id>/albums")
@jwt_required()
def get_user_albums(user_id: str):
    """
    Albums of a user, each with its photos
    ---
    tags: [Albums]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, required: true }
    responses:
      200: { description: OK }
    """
    session = storage.get_session()
    albums = (
        session.query(Album)
        .filter(Album.user_id == user_id)
        .order_by(Album.created_at.desc())
        .all()
    )
    return jsonify({"data": out_list_schema.dump(albums)}), 200


@bp.get("/albums/<album_id>")
@jwt_required()
def get_album(album_id: str):
    """
    Get an album with its photos
    ---
    tags: [Albums]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: album_id, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: Album not found }
    """
    album = get_or_404(Album, album_id, "Album")
    return jsonify({"data": out_schema.dump(album)}), 200


@bp.put("/albums/<album_id>")
@jwt_required()
def update_album(album_id: str):
    """
    Update an album (owner only)
    ---
    tags: [Albums]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: album_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            name: { type: string }
            description: { type: string }
            privacy: { type: string }
    responses:
      200: { description: Updated }
      403: { description: Not the owner }
      404: { description: Album not found }
    """
    album = get_or_404(Album, album_id, "Album")
    ensure_owner(album.user_id, "update this album")

    data = update_schema.load(request.get_json(silent=True) or {})
    album.name = data["name"].strip()
    album.description = data.get("description")
    album.privacy = data["privacy"]
    album.save()
    return jsonify({"data": out_schema.dump(album)}), 200


@bp.delete("/albums/<album_id>")
@jwt_required()
def delete_album(album_id: str):
    """
    Delete an album and its photos (owner only)
    ---
    tags: [Albums]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: album_id, type: string, required: true }
    responses:
      200: { description: Deleted }
      403: { description: Not the owner }
      404: { description: Album not found }
    """
    album = get_or_404(Album, album_id, "Album")
    ensure_owner(album.user_id, "delete this album")

    # Photos are removed through the delete-orphan cascade in the same commit
    album.delete()
    storage.save()
    return jsonify({"message": "Album deleted"}), 200


@bp.post("/albums/<album_id>/photos")
@jwt_required()
def add_photo(album_id: str):
    """
    Add a photo to an album (owner only)
    ---
    tags: [Albums]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: album_id, type: string, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [url]
          properties:
            url: { type: string }
            caption: { type: string }
    responses:
      201: { description: Created }
      403: { description: Not the owner }
      404: { description: Album not found }
    """
    album = get_or_404(Album, album_id, "Album")
    ensure_owner(album.user_id, "add photos to this album")

    data = photo_create_schema.load(request.get_json(silent=True) or {})
    photo = Photo(album_id=album.id, url=data["url"].strip(), caption=data.get("caption"))
    storage.new(photo)
    storage.save()
    return jsonify({"data": photo_out_schema.dump(photo)}), 201


@bp.delete("/photos/<photo_id>")
@jwt_required()
def delete_photo(photo_id: str):
    """
    Delete a photo (owner of the album only)
    ---
    tags: [Albums]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: photo_id, type: string, required: true }
    responses:
      200: { description: Deleted }
      403: { description: Not the owner }
      404: { description: Photo not found }
    """
    photo = get_or_404(Photo, photo_id, "Photo")
    ensure_owner(photo.album.user_id, "delete this photo")

    photo.delete()
    storage.save()
    return jsonify({"message": "Photo deleted"}), 200
