"""
ORM definitions for OAuth clients and the token rows that hang off them.

Token issuance belongs to the upstream authorization server; the token tables
are modeled here only so that deleting a client can take its tokens with it.
"""

from typing import List, Optional

from passlib.hash import argon2
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)

from idp_console.database import Base, JSONType, generate_uuid, utcnow
from idp_console.oauth_client.codec import read_redirect_uris, write_redirect_uris
from idp_console.oauth_client.util import generate_client_secret


class OAuthClient(Base):
    """OAuth2 client application."""

    __tablename__ = "oauth_clients"

    id = Column(String, primary_key=True, default=generate_uuid)
    client_id = Column(String, unique=True, nullable=False, index=True)
    # argon2 hash; NULL for public clients.
    client_secret_hash = Column(String, nullable=True)
    name = Column(String(256), nullable=False)
    icon = Column(String, nullable=True)
    uri = Column(String, nullable=True)
    tos = Column(String, nullable=True)
    policy = Column(String, nullable=True)
    contacts = Column(JSONType, nullable=False, default=list)
    client_metadata = Column("metadata", Text, nullable=True)
    type = Column(String, nullable=False, default="web")
    disabled = Column(Boolean, nullable=False, default=False)
    public = Column(Boolean, nullable=False, default=False)
    token_endpoint_auth_method = Column(String, nullable=False, default="client_secret_basic")
    jwks_uri = Column(String, nullable=True)
    scopes = Column(JSONType, nullable=False, default=list)
    grant_types = Column(JSONType, nullable=False, default=list)
    response_types = Column(JSONType, nullable=False, default=list)
    # Raw storage value, see oauth_client.codec for the shapes per version.
    redirect_uris_raw = Column("redirect_uris", Text, nullable=False)
    redirect_uris_version = Column(Integer, nullable=True)
    user_id = Column(
        String,
        ForeignKey("users.user_id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at = Column(DateTime, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, default=utcnow, server_default=func.now())

    @property
    def redirect_uris(self) -> List[str]:
        return read_redirect_uris(self.redirect_uris_raw, self.redirect_uris_version)

    @redirect_uris.setter
    def redirect_uris(self, uris: List[str]):
        self.redirect_uris_raw, self.redirect_uris_version = write_redirect_uris(uris)

    @property
    def has_secret(self) -> bool:
        return bool(self.client_secret_hash)

    def set_secret(self, secret: Optional[str]):
        self.client_secret_hash = argon2.hash(secret) if secret else None

    def verify_secret(self, secret: str) -> bool:
        """Verify a presented client secret against the stored hash."""
        if not self.client_secret_hash or not secret:
            return False
        return argon2.verify(secret, self.client_secret_hash)

    def regenerate_secret(self) -> str:
        """Replace the client secret; the previous one stops verifying immediately."""
        new_secret = generate_client_secret()
        self.set_secret(new_secret)
        return new_secret


class OAuthAccessToken(Base):
    __tablename__ = "oauth_access_tokens"

    id = Column(String, primary_key=True, default=generate_uuid)
    token = Column(String, unique=True, nullable=False)
    client_id = Column(
        String,
        ForeignKey("oauth_clients.client_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=True)
    reference_id = Column(String, nullable=True)
    scopes = Column(JSONType, nullable=False, default=list)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, server_default=func.now())


class OAuthRefreshToken(Base):
    __tablename__ = "oauth_refresh_tokens"

    id = Column(String, primary_key=True, default=generate_uuid)
    token = Column(String, nullable=False)
    client_id = Column(
        String,
        ForeignKey("oauth_clients.client_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    reference_id = Column(String, nullable=True)
    scopes = Column(JSONType, nullable=False, default=list)
    expires_at = Column(DateTime, nullable=False)
    revoked = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, server_default=func.now())
