from enum import Enum

from sqlalchemy import Column, String, ForeignKey, UniqueConstraint, CheckConstraint, Index
from sqlalchemy.types import Enum as SAEnum

from models.base_model import BaseModel, Base


class FriendRequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class FriendRequest(BaseModel, Base):
    __tablename__ = "friend_requests"

    from_user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    to_user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        SAEnum(FriendRequestStatus, name="friend_request_status", native_enum=False,
               values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=FriendRequestStatus.PENDING,
    )

    __table_args__ = (
        CheckConstraint("from_user_id <> to_user_id", name="ck_friend_requests_not_self"),
    )


class Friendship(BaseModel, Base):
    """One direction of a friendship; accepting a request writes both."""
    __tablename__ = "friends"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    friend_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "friend_id", name="uq_friends_pair"),
        Index("ix_friends_user_id", "user_id"),
    )
