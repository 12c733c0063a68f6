from marshmallow import Schema, fields

from models.schemas.common import EnumValue


class FriendRequestOutSchema(Schema):
    id = fields.String()
    from_user_id = fields.String()
    to_user_id = fields.String()
    status = EnumValue()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
