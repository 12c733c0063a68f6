from marshmallow import Schema, fields, validate

from models.schemas.common import PRIVACY_CHOICES, EnumValue, validate_not_blank


class AlbumCreateSchema(Schema):
    name = fields.String(required=True, validate=validate_not_blank)
    description = fields.String(load_default=None, allow_none=True)
    privacy = fields.String(load_default="public", validate=validate.OneOf(PRIVACY_CHOICES))


class AlbumUpdateSchema(AlbumCreateSchema):
    pass


class PhotoCreateSchema(Schema):
    url = fields.String(required=True, validate=[validate_not_blank, validate.Length(max=512)])
    caption = fields.String(load_default=None, allow_none=True)


class PhotoOutSchema(Schema):
    id = fields.String()
    album_id = fields.String()
    url = fields.String()
    caption = fields.String(allow_none=True)
    created_at = fields.DateTime()


class AlbumOutSchema(Schema):
    id = fields.String()
    user_id = fields.String()
    name = fields.String()
    description = fields.String(allow_none=True)
    privacy = EnumValue()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    photos = fields.List(fields.Nested(PhotoOutSchema))
