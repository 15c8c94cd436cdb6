"""
Admin API for OAuth client registration and maintenance.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from idp_console.database import get_db_session
from idp_console.oauth_client.request import parse_create_request, parse_update_request
from idp_console.oauth_client.response import (
    OAuthClientCreationResponse,
    OAuthClientDeletedResponse,
    OAuthClientListResponse,
    OAuthClientResponse,
    OAuthClientSecretResponse,
)
from idp_console.oauth_client.service import (
    create_client,
    delete_client,
    get_client,
    list_clients,
    rotate_secret,
    update_client,
)
from idp_console.permissions import Permissioning
from idp_console.user.schemas import User
from idp_console.user.service import require_role

router = APIRouter()
require_admin = require_role(Permissioning.admin)


@router.get("", response_model=OAuthClientListResponse)
async def list_oauth_clients(
    search: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    """
    List OAuth clients, newest first.
    Use search to filter by name or client_id (case-insensitive substring).
    """
    rows, total = await list_clients(db, search=search, limit=limit, offset=offset)
    return {
        "total": total,
        "limit": limit,
        "offset": offset,
        "items": [OAuthClientResponse.from_client(client) for client in rows],
    }


@router.post("", response_model=OAuthClientCreationResponse)
async def create_oauth_client(
    payload: Any = Body(...),
    db: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(require_admin),
):
    """Register a new OAuth client. The secret is only returned here."""
    args = parse_create_request(payload)
    client, client_secret = await create_client(db, args, user_id=current_user.user_id)
    response = OAuthClientCreationResponse.model_validate(client)
    response.client_secret = client_secret
    return response


@router.get("/{client_id}", response_model=OAuthClientResponse)
async def get_oauth_client(
    client_id: str,
    db: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    """Get details of an OAuth client."""
    return OAuthClientResponse.from_client(await get_client(db, client_id))


@router.patch("/{client_id}", response_model=OAuthClientResponse)
async def update_oauth_client(
    client_id: str,
    payload: Any = Body(...),
    db: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    """Update an OAuth client; fields absent from the payload are left untouched."""
    args = parse_update_request(payload)
    client = await update_client(db, client_id, args.changes())
    return OAuthClientResponse.from_client(client)


@router.delete("/{client_id}", response_model=OAuthClientDeletedResponse)
async def delete_oauth_client(
    client_id: str,
    db: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    """Delete an OAuth client along with its consents and tokens."""
    await delete_client(db, client_id)
    return OAuthClientDeletedResponse(client_id=client_id)


@router.post("/{client_id}/regenerate-secret", response_model=OAuthClientSecretResponse)
async def regenerate_oauth_client_secret(
    client_id: str,
    db: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    """Regenerate the client secret. The previous secret stops working immediately."""
    new_secret = await rotate_secret(db, client_id)
    return OAuthClientSecretResponse(client_id=client_id, client_secret=new_secret)
