"""
Response models for a user's own consent grants.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from idp_console.consent.schemas import OAuthConsent


class ConsentResponse(BaseModel):
    client_id: str
    client_name: Optional[str] = None
    client_icon: Optional[str] = None
    reference_id: Optional[str] = None
    scopes: List[str] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_consent(cls, consent: OAuthConsent) -> "ConsentResponse":
        return cls(
            client_id=consent.client_id,
            client_name=consent.client.name if consent.client else None,
            client_icon=consent.client.icon if consent.client else None,
            reference_id=consent.reference_id,
            scopes=consent.scopes or [],
            created_at=consent.created_at,
            updated_at=consent.updated_at,
        )


class ConsentRevokedResponse(BaseModel):
    client_id: str
    revoked: bool = True
