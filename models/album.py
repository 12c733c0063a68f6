from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base
from models.post import privacy_column


class Album(BaseModel, Base):
    __tablename__ = "albums"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    privacy = privacy_column()

    # Photos go with their album
    photos = relationship(
        "Photo",
        back_populates="album",
        cascade="all, delete-orphan",
        order_by="Photo.created_at",
    )


class Photo(BaseModel, Base):
    __tablename__ = "photos"

    album_id = Column(String(36), ForeignKey("albums.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(512), nullable=False)
    caption = Column(Text, nullable=True)

    album = relationship("Album", back_populates="photos")
