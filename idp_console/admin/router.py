"""
Console dashboard statistics.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from idp_console.consent.schemas import OAuthConsent
from idp_console.database import get_db_session
from idp_console.oauth_client.schemas import OAuthClient
from idp_console.permissions import Permissioning
from idp_console.user.schemas import User
from idp_console.user.service import require_role

router = APIRouter()


@router.get("/stats")
async def get_stats(
    db: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_role(Permissioning.admin, Permissioning.stats_viewer)),
):
    """Headline counts for the admin dashboard."""
    users = (await db.execute(select(func.count()).select_from(User))).scalar_one()
    clients = (await db.execute(select(func.count()).select_from(OAuthClient))).scalar_one()
    disabled = (
        await db.execute(
            select(func.count()).select_from(OAuthClient).where(OAuthClient.disabled.is_(True))
        )
    ).scalar_one()
    consents = (await db.execute(select(func.count()).select_from(OAuthConsent))).scalar_one()
    return {
        "users": users,
        "clients": clients,
        "disabled_clients": disabled,
        "consents": consents,
    }
