from sqlalchemy import Column, String, ForeignKey, UniqueConstraint, Index

from models.base_model import BaseModel, Base


class Like(BaseModel, Base):
    __tablename__ = "likes"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    resource_type = Column(String(32), nullable=False)
    resource_id = Column(String(36), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "resource_type", "resource_id", name="uq_likes_user_resource"),
        Index("ix_likes_resource", "resource_type", "resource_id"),
    )
