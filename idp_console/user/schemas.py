"""
ORM definitions for users and their sessions.

Both tables are owned by the authentication framework; this service only reads
them to identify the caller.
"""

import hashlib

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, String, func
from sqlalchemy.orm import relationship

from idp_console.database import Base, generate_uuid, utcnow
from idp_console.permissions import Permissioning


class User(Base):
    __tablename__ = "users"

    user_id = Column(String, primary_key=True, default=generate_uuid)
    username = Column(String, unique=True, nullable=False)
    email = Column(String, unique=True, nullable=True)
    permissions_bitmask = Column(BigInteger, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, server_default=func.now())

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")

    def has_role(self, role) -> bool:
        return Permissioning.enabled(self, role)


class UserSession(Base):
    __tablename__ = "sessions"

    session_id = Column(String, primary_key=True, default=generate_uuid)
    token_hash = Column(String, unique=True, nullable=False, index=True)
    user_id = Column(
        String,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, server_default=func.now())

    user = relationship("User", back_populates="sessions")

    @staticmethod
    def hash_token(token: str) -> str:
        """SHA256 of the cookie value, so raw session tokens never hit the table."""
        return hashlib.sha256(token.encode()).hexdigest()
