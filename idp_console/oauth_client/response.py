"""
Response models for OAuth client administration.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from idp_console.oauth_client.schemas import OAuthClient
from idp_console.pagination import PaginatedResponse


class OAuthClientResponse(BaseModel):
    """API-safe view of a client; the secret hash is never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    client_id: str
    name: str
    icon: Optional[str] = None
    uri: Optional[str] = None
    tos: Optional[str] = None
    policy: Optional[str] = None
    contacts: List[str] = []
    metadata: Optional[str] = Field(default=None, validation_alias="client_metadata")
    type: str
    disabled: bool
    public: bool
    token_endpoint_auth_method: str
    jwks_uri: Optional[str] = None
    scopes: List[str] = []
    grant_types: List[str] = []
    response_types: List[str] = []
    redirect_uris: List[str]
    has_secret: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_client(cls, client: OAuthClient) -> "OAuthClientResponse":
        return cls.model_validate(client)


class OAuthClientCreationResponse(OAuthClientResponse):
    """Returned once at registration; includes the plaintext secret for confidential clients."""

    client_secret: Optional[str] = None


class OAuthClientSecretResponse(BaseModel):
    client_id: str
    client_secret: str


class OAuthClientDeletedResponse(BaseModel):
    client_id: str
    deleted: bool = True


class OAuthClientListResponse(PaginatedResponse):
    items: List[OAuthClientResponse]
