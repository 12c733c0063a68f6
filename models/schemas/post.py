from marshmallow import Schema, fields, validate

from models.schemas.common import PRIVACY_CHOICES, EnumValue, validate_not_blank


class PostCreateSchema(Schema):
    content = fields.String(required=True, validate=validate_not_blank)
    privacy = fields.String(load_default="public", validate=validate.OneOf(PRIVACY_CHOICES))


class PostUpdateSchema(PostCreateSchema):
    pass


class PostOutSchema(Schema):
    id = fields.String()
    user_id = fields.String()
    content = fields.String()
    privacy = EnumValue()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class FeedPostOutSchema(PostOutSchema):
    # Author details for rendering the feed
    user_name = fields.Function(lambda obj: obj.author.name if obj.author else None)
    profile_picture_url = fields.Function(lambda obj: obj.author.profile_picture_url if obj.author else None)
