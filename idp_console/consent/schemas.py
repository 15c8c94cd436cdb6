"""
ORM definition for end-user consent.

A row means the user granted the listed scopes to the client; there is no
separate "given" flag, and revoking consent deletes the row.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import relationship

from idp_console.database import Base, JSONType, generate_uuid, utcnow


class OAuthConsent(Base):
    __tablename__ = "oauth_consents"

    id = Column(String, primary_key=True, default=generate_uuid)
    client_id = Column(
        String,
        ForeignKey("oauth_clients.client_id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(
        String,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    # Organization or session scoping, when the grant is not user-wide.
    reference_id = Column(String, nullable=True)
    scopes = Column(JSONType, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, default=utcnow, server_default=func.now())

    client = relationship("OAuthClient")

    __table_args__ = (Index("idx_oauth_consent_client_user", "client_id", "user_id"),)
