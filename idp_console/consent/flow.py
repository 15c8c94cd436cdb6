"""
Consent capture: present the request to the user, then forward their decision.

Nothing is held in process between the two steps; every request rebuilds its
view from the query or form parameters.
"""

from enum import Enum
from typing import Dict, List, Optional

from loguru import logger
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from idp_console.consent.service import record_consent
from idp_console.exceptions import ExternalServiceError
from idp_console.oauth_client.service import get_client_by_client_id
from idp_console.scope.schemas import ResolvedScope
from idp_console.scope.service import parse_scope_param, resolve_scopes
from idp_console.user.schemas import User


class ConsentState(str, Enum):
    PENDING = "pending"
    PRESENTED = "presented"
    DECIDED = "decided"
    REDIRECT = "redirect"
    ERROR = "error"


class ConsentErrorCode(str, Enum):
    CLIENT_NOT_FOUND = "client_not_found"
    MISSING_CODE = "missing_consent_code"
    AUTHORIZATION_FAILED = "authorization_failed"


class ConsentView(BaseModel):
    state: ConsentState = ConsentState.PENDING
    locale: str
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    client_icon: Optional[str] = None
    client_uri: Optional[str] = None
    consent_code: Optional[str] = None
    scope: Optional[str] = None
    scopes: List[ResolvedScope] = []
    error: Optional[ConsentErrorCode] = None
    redirect_uri: Optional[str] = None


async def present_consent(
    db: AsyncSession,
    locale: str,
    client_id: Optional[str],
    consent_code: Optional[str],
    scope: Optional[str],
) -> ConsentView:
    """
    Build the consent screen. An unknown client is reported before a missing
    consent code, and neither case touches the authorization server.
    """
    view = ConsentView(locale=locale, client_id=client_id, consent_code=consent_code, scope=scope)
    client = await get_client_by_client_id(db, client_id) if client_id else None
    if not client:
        view.state = ConsentState.ERROR
        view.error = ConsentErrorCode.CLIENT_NOT_FOUND
        return view
    view.client_name = client.name
    view.client_icon = client.icon
    view.client_uri = client.uri
    if not consent_code:
        view.state = ConsentState.ERROR
        view.error = ConsentErrorCode.MISSING_CODE
        return view

    requested = parse_scope_param(scope) or list(client.scopes or [])
    view.scope = " ".join(requested)
    view.scopes = await resolve_scopes(db, requested, locale)
    view.state = ConsentState.PRESENTED
    return view


async def decide_consent(
    db: AsyncSession,
    gateway,
    view: ConsentView,
    user: User,
    accept: bool,
    cookies: Optional[Dict[str, str]] = None,
) -> ConsentView:
    """
    Forward the decision on a presented view. Upstream failures return the view
    to PRESENTED with a generic error; the user may submit again.
    """
    if view.state != ConsentState.PRESENTED:
        return view
    view.state = ConsentState.DECIDED
    try:
        view.redirect_uri = await gateway.submit_consent(
            consent_code=view.consent_code,
            accept=accept,
            scope=view.scope,
            cookies=cookies,
        )
    except ExternalServiceError as exc:
        logger.error(
            f"Consent submission failed for client_id={view.client_id} "
            f"user_id={user.user_id}: {exc.message}"
        )
        view.state = ConsentState.PRESENTED
        view.error = ConsentErrorCode.AUTHORIZATION_FAILED
        return view

    if accept:
        # Upstream has already accepted; its redirect stands even if the local record fails.
        try:
            await record_consent(db, view.client_id, user.user_id, parse_scope_param(view.scope))
        except SQLAlchemyError:
            logger.exception(
                f"Failed to record consent locally for client_id={view.client_id} user_id={user.user_id}"
            )
            await db.rollback()
    view.state = ConsentState.REDIRECT
    view.error = None
    return view
