from enum import Enum

from sqlalchemy import Column, String, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import BaseModel, Base


class Privacy(str, Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    ONLY_ME = "only_me"


def privacy_column():
    return Column(
        SAEnum(Privacy, name="privacy", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Privacy.PUBLIC,
    )


class Post(BaseModel, Base):
    __tablename__ = "posts"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    privacy = privacy_column()

    author = relationship("User")

    __table_args__ = (
        Index("ix_posts_user_created", "user_id", "created_at"),
    )
