"""
RefreshToken model: server-side record of an opaque refresh token.
Fields:
- token (unique) - the random string handed to the client
- user_id (String(36)) - FK to users.id
- revoked (bool) - one-way; a revoked token is never usable again
- expires_at
"""
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from models.base_model import BaseModel, Base, as_utc


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(128), nullable=False, unique=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    revoked = Column(Boolean, default=False, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    def is_expired(self, now: datetime) -> bool:
        return as_utc(self.expires_at) < now

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} revoked={self.revoked}>"
