"""
Local consent records. A row is the grant; revoking deletes it.
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from idp_console.consent.schemas import OAuthConsent
from idp_console.database import utcnow
from idp_console.exceptions import NotFound


async def get_consent(
    db: AsyncSession,
    client_id: str,
    user_id: str,
    reference_id: Optional[str] = None,
) -> Optional[OAuthConsent]:
    query = select(OAuthConsent).where(
        OAuthConsent.client_id == client_id,
        OAuthConsent.user_id == user_id,
    )
    if reference_id is None:
        query = query.where(OAuthConsent.reference_id.is_(None))
    else:
        query = query.where(OAuthConsent.reference_id == reference_id)
    return (await db.execute(query)).scalars().first()


async def record_consent(
    db: AsyncSession,
    client_id: str,
    user_id: str,
    scopes: List[str],
    reference_id: Optional[str] = None,
) -> OAuthConsent:
    """
    Upsert the grant for (client, user, reference); scopes are replaced, not merged.
    """
    scopes = list(dict.fromkeys(scopes))
    consent = await get_consent(db, client_id, user_id, reference_id)
    if consent:
        consent.scopes = scopes
        consent.updated_at = utcnow()
    else:
        consent = OAuthConsent(
            client_id=client_id,
            user_id=user_id,
            reference_id=reference_id,
            scopes=scopes,
        )
        db.add(consent)
    await db.commit()
    await db.refresh(consent)
    logger.info(f"Recorded consent for {user_id=} {client_id=} scopes={scopes}")
    return consent


async def list_user_consents(db: AsyncSession, user_id: str) -> List[OAuthConsent]:
    result = await db.execute(
        select(OAuthConsent)
        .options(joinedload(OAuthConsent.client))
        .where(OAuthConsent.user_id == user_id)
        .order_by(OAuthConsent.updated_at.desc(), OAuthConsent.client_id)
    )
    return list(result.unique().scalars().all())


async def revoke_consent(db: AsyncSession, client_id: str, user_id: str) -> int:
    """
    Delete every grant the user gave the client.
    """
    result = await db.execute(
        delete(OAuthConsent).where(
            OAuthConsent.client_id == client_id,
            OAuthConsent.user_id == user_id,
        )
    )
    if not result.rowcount:
        raise NotFound("Consent", client_id)
    await db.commit()
    logger.info(f"Revoked consent for {user_id=} {client_id=}")
    return result.rowcount
