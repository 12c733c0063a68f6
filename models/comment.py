from sqlalchemy import Column, String, Text, ForeignKey, Index
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Comment(BaseModel, Base):
    __tablename__ = "comments"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    resource_type = Column(String(32), nullable=False)
    resource_id = Column(String(36), nullable=False)
    content = Column(Text, nullable=False)

    author = relationship("User")

    __table_args__ = (
        Index("ix_comments_resource", "resource_type", "resource_id"),
    )
