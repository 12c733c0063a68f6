from marshmallow import Schema, fields

from models.schemas.common import validate_not_blank
from models.schemas.user import UserPublicSchema


class LikeOutSchema(Schema):
    user_id = fields.String()
    resource_type = fields.String()
    resource_id = fields.String()
    created_at = fields.DateTime()


class CommentCreateSchema(Schema):
    content = fields.String(required=True, validate=validate_not_blank)


class CommentOutSchema(Schema):
    id = fields.String()
    user_id = fields.String()
    resource_type = fields.String()
    resource_id = fields.String()
    content = fields.String()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    user = fields.Nested(UserPublicSchema, attribute="author")
