from marshmallow import Schema, fields, pre_load, validate, validates, ValidationError

from models.schemas.common import validate_not_blank, validate_not_future


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class _EmailNormalizing:
    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data


class UserCreateSchema(_EmailNormalizing, Schema):
    name = fields.String(required=True, validate=[validate_not_blank, validate.Length(max=255)])
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)
    birth_date = fields.Date(required=True)

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")

    @validates("birth_date")
    def validate_birth_date(self, value, **kwargs):
        validate_not_future(value)


class UserLoginSchema(_EmailNormalizing, Schema):
    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)


class RefreshRequestSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate_not_blank)


class UserUpdateSchema(_EmailNormalizing, Schema):
    """PUT /me: both fields required. Use partial=True for PATCH."""
    name = fields.String(required=True, validate=[validate_not_blank, validate.Length(max=255)])
    email = fields.Email(required=True)


class UserOutSchema(Schema):
    """The account owner's own view. Never carries the password hash."""
    id = fields.String()
    name = fields.String()
    email = fields.String()
    birth_date = fields.Date(allow_none=True)
    profile_picture_url = fields.String(allow_none=True)
    cover_photo_url = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class UserPublicSchema(Schema):
    id = fields.String()
    name = fields.String()
    profile_picture_url = fields.String(allow_none=True)
    cover_photo_url = fields.String(allow_none=True)
    created_at = fields.DateTime()
