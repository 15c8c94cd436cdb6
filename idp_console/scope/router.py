"""
Public scope listing, for documentation and scope selection UIs.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from idp_console.database import get_db_session
from idp_console.i18n import resolve_locale
from idp_console.scope.dictionaries import WELL_KNOWN_SCOPES
from idp_console.scope.service import resolve_scopes

router = APIRouter()


@router.get("/scopes")
async def list_scopes(
    locale: Optional[str] = None,
    db: AsyncSession = Depends(get_db_session),
):
    """List the supported scopes with localized descriptions."""
    locale = resolve_locale(locale)
    resolved = await resolve_scopes(db, WELL_KNOWN_SCOPES, locale)
    return {"locale": locale, "scopes": [scope.model_dump() for scope in resolved]}
