from models.base_model import Base, BaseModel
from sqlalchemy import Column, String, Date


class User(BaseModel, Base):
    __tablename__ = "users"
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    birth_date = Column(Date, nullable=True)
    profile_picture_url = Column(String(512), nullable=True)
    cover_photo_url = Column(String(512), nullable=True)
