"""
Record store for OAuth clients.
"""

from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from idp_console.config import settings
from idp_console.consent.schemas import OAuthConsent
from idp_console.database import utcnow
from idp_console.exceptions import ConflictError, NotFound
from idp_console.oauth_client.request import OAuthClientCreateRequest
from idp_console.oauth_client.schemas import (
    OAuthAccessToken,
    OAuthClient,
    OAuthRefreshToken,
)
from idp_console.oauth_client.util import generate_client_id, generate_client_secret

# One retry with a fresh identifier; a second collision is a bug, not bad luck.
CLIENT_ID_MAX_ATTEMPTS = 2

# Update payload keys -> ORM attributes.
UPDATABLE_FIELDS = {
    "name": "name",
    "redirect_uris": "redirect_uris",
    "icon": "icon",
    "metadata": "client_metadata",
    "disabled": "disabled",
    "type": "type",
}


def _cache_key(client_id: str) -> str:
    return f"idp:client:{client_id}"


async def invalidate_client_cache(client_id: str):
    """Invalidate the cached lookup for a client."""
    await settings.redis_client.delete(_cache_key(client_id))


async def _client_id_exists(db: AsyncSession, client_id: str) -> bool:
    result = await db.execute(select(OAuthClient.id).where(OAuthClient.client_id == client_id))
    return result.first() is not None


async def create_client(
    db: AsyncSession,
    args: OAuthClientCreateRequest,
    user_id: Optional[str] = None,
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
) -> Tuple[OAuthClient, Optional[str]]:
    """
    Persist a new client, generating whichever credentials were not supplied.

    Returns the client and the plaintext secret (None for public clients); the
    plaintext is not recoverable afterwards.
    """
    explicit_id = client_id is not None
    secret = None if args.is_public else (client_secret or generate_client_secret())

    for attempt in range(1, CLIENT_ID_MAX_ATTEMPTS + 1):
        candidate = client_id if explicit_id else generate_client_id()
        if await _client_id_exists(db, candidate):
            if explicit_id:
                raise ConflictError(f"Client ID already registered: {candidate}")
            logger.warning(f"Generated client_id collided on attempt {attempt}, retrying")
            continue

        client = OAuthClient(
            client_id=candidate,
            name=args.client_name,
            icon=args.logo_uri,
            uri=args.client_uri,
            tos=args.tos_uri,
            policy=args.policy_uri,
            jwks_uri=args.jwks_uri,
            contacts=list(args.contacts),
            type=args.client_type,
            public=args.is_public,
            disabled=False,
            token_endpoint_auth_method=args.token_endpoint_auth_method,
            scopes=args.scopes,
            grant_types=list(args.grant_types),
            response_types=list(args.response_types),
            redirect_uris=args.redirect_uris,
            user_id=user_id,
        )
        client.set_secret(secret)
        db.add(client)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            if not await _client_id_exists(db, candidate):
                raise
            if explicit_id:
                raise ConflictError(f"Client ID already registered: {candidate}")
            logger.warning(f"Generated client_id collided on insert (attempt {attempt}), retrying")
            continue

        await db.refresh(client)
        await invalidate_client_cache(client.client_id)
        logger.success(f"Registered OAuth client {client.client_id=} {client.name=}")
        return client, secret

    logger.error(f"Unable to allocate a unique client_id after {CLIENT_ID_MAX_ATTEMPTS} attempts")
    raise ConflictError("Unable to allocate a unique client ID")


async def get_client(db: AsyncSession, client_id: str, for_update: bool = False) -> OAuthClient:
    query = select(OAuthClient).where(OAuthClient.client_id == client_id)
    if for_update:
        query = query.with_for_update()
    client = (await db.execute(query)).scalar_one_or_none()
    if not client:
        raise NotFound("Client", client_id)
    return client


async def update_client(db: AsyncSession, client_id: str, changes: dict) -> OAuthClient:
    """
    Apply only the provided fields. Redirect URIs replace the stored list and are
    written back in the current storage representation.
    """
    client = await get_client(db, client_id, for_update=True)
    for key, value in changes.items():
        attribute = UPDATABLE_FIELDS.get(key)
        if attribute is None:
            raise ValueError(f"Unsupported client field: {key}")
        setattr(client, attribute, value)
    client.updated_at = utcnow()
    await db.commit()
    await db.refresh(client)
    await invalidate_client_cache(client_id)
    logger.info(f"Updated OAuth client {client_id=}: {sorted(changes)}")
    return client


async def rotate_secret(db: AsyncSession, client_id: str) -> str:
    """
    Replace the client's secret and return the new plaintext, exactly once.
    There is no grace period: the previous secret is invalid as soon as this commits.
    """
    client = await get_client(db, client_id, for_update=True)
    new_secret = client.regenerate_secret()
    client.updated_at = utcnow()
    await db.commit()
    await invalidate_client_cache(client_id)
    logger.info(f"Rotated client secret for {client_id=}")
    return new_secret


async def delete_client(db: AsyncSession, client_id: str):
    """
    Delete a client together with its consents and tokens, in one transaction.
    """
    client = await get_client(db, client_id, for_update=True)
    for model in (OAuthConsent, OAuthAccessToken, OAuthRefreshToken):
        await db.execute(delete(model).where(model.client_id == client_id))
    await db.delete(client)
    await db.commit()
    await invalidate_client_cache(client_id)
    logger.info(f"Deleted OAuth client {client_id=} and dependent rows")


async def list_clients(
    db: AsyncSession,
    search: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
) -> Tuple[List[OAuthClient], int]:
    query = select(OAuthClient)
    if search and search.strip():
        term = search.strip()
        query = query.where(
            or_(
                OAuthClient.name.icontains(term, autoescape=True),
                OAuthClient.client_id.icontains(term, autoescape=True),
            )
        )
    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0
    query = (
        query.order_by(OAuthClient.created_at.desc(), OAuthClient.client_id.asc())
        .offset(offset)
        .limit(limit)
    )
    rows = (await db.execute(query)).scalars().all()
    return list(rows), total


async def get_client_by_client_id(db: AsyncSession, client_id: str) -> Optional[OAuthClient]:
    """
    Load an enabled client by client_id, caching the primary key lookup.
    Returns None for unknown and disabled clients alike.
    """
    cache_key = _cache_key(client_id)
    cached = await settings.redis_client.get(cache_key)
    if cached:
        pk = cached.decode() if isinstance(cached, bytes) else cached
        if pk == "__none__":
            return None
        client = (
            await db.execute(
                select(OAuthClient).where(OAuthClient.id == pk, OAuthClient.disabled.is_(False))
            )
        ).scalar_one_or_none()
        if client:
            return client
        # Deleted or disabled since it was cached.
        await settings.redis_client.delete(cache_key)

    client = (
        await db.execute(
            select(OAuthClient).where(
                OAuthClient.client_id == client_id, OAuthClient.disabled.is_(False)
            )
        )
    ).scalar_one_or_none()
    if client:
        await settings.redis_client.set(cache_key, client.id, ex=settings.client_cache_ttl_seconds)
    else:
        await settings.redis_client.set(
            cache_key, "__none__", ex=settings.client_cache_negative_ttl_seconds
        )
    return client


def verify_client_secret(client: OAuthClient, secret: str) -> bool:
    return client.verify_secret(secret)
