from datetime import date

from marshmallow import ValidationError, fields

PRIVACY_CHOICES = ("public", "friends", "only_me")

# Path segment -> resource kind that can be liked or commented on
RESOURCE_TYPES = ("posts", "albums", "photos", "comments")


def validate_not_future(d: date) -> None:
    if d and d > date.today():
        raise ValidationError("Date cannot be in the future.")


def validate_not_blank(value: str) -> None:
    if value is None or not value.strip():
        raise ValidationError("Field may not be blank.")


class EnumValue(fields.Field):
    """Dump str-based Enum members as their plain value."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return getattr(value, "value", value)
