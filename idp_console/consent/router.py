"""
Consent screen for end users, plus listing and revocation of their grants.
"""

from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from idp_console.config import settings
from idp_console.consent.flow import (
    ConsentErrorCode,
    ConsentState,
    ConsentView,
    decide_consent,
    present_consent,
)
from idp_console.consent.gateway import get_gateway
from idp_console.consent.response import ConsentResponse, ConsentRevokedResponse
from idp_console.consent.service import list_user_consents, revoke_consent
from idp_console.consent.templater import consent_page, error_page
from idp_console.database import get_db_session
from idp_console.i18n import resolve_locale
from idp_console.user.schemas import User
from idp_console.user.service import get_current_user

router = APIRouter()

ERROR_STATUS = {
    ConsentErrorCode.CLIENT_NOT_FOUND: 404,
    ConsentErrorCode.MISSING_CODE: 400,
}


def _login_redirect(request: Request, locale: str) -> RedirectResponse:
    """Send the browser to sign in, returning to this consent request afterwards."""
    return_to = request.url.path
    if request.url.query:
        return_to += f"?{request.url.query}"
    login_url = settings.login_url.format(locale=locale)
    return RedirectResponse(url=f"{login_url}?callbackURL={quote(return_to, safe='')}", status_code=303)


def _render(request: Request, view: ConsentView, user: Optional[User] = None) -> HTMLResponse:
    branding = request.app.state.branding
    if view.state == ConsentState.ERROR:
        return HTMLResponse(
            content=error_page(view, branding, login_url=settings.login_url.format(locale=view.locale)),
            status_code=ERROR_STATUS.get(view.error, 400),
        )
    return HTMLResponse(content=consent_page(view, branding, user_name=user.username if user else ""))


@router.get("/{locale}/consent", response_class=HTMLResponse)
async def consent_get(
    request: Request,
    locale: str,
    client_id: Optional[str] = None,
    consent_code: Optional[str] = None,
    scope: Optional[str] = None,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user(raise_not_found=False)),
):
    """Show the consent screen for a pending authorization request."""
    locale = resolve_locale(locale)
    if not user:
        return _login_redirect(request, locale)
    view = await present_consent(db, locale, client_id, consent_code, scope)
    return _render(request, view, user)


@router.post("/{locale}/consent", response_class=HTMLResponse)
async def consent_post(
    request: Request,
    locale: str,
    client_id: Optional[str] = Form(None),
    consent_code: Optional[str] = Form(None),
    scope: Optional[str] = Form(None),
    accept: str = Form(""),
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user(raise_not_found=False)),
    gateway=Depends(get_gateway),
):
    """Handle the user's decision on a consent request."""
    locale = resolve_locale(locale)
    if not user:
        return _login_redirect(request, locale)
    view = await present_consent(db, locale, client_id, consent_code, scope)
    view = await decide_consent(
        db,
        gateway,
        view,
        user,
        accept=accept.strip().lower() == "true",
        cookies=dict(request.cookies),
    )
    if view.state == ConsentState.REDIRECT:
        return RedirectResponse(url=view.redirect_uri, status_code=303)
    return _render(request, view, user)


@router.get("/consents", response_model=List[ConsentResponse])
async def list_my_consents(
    db: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user()),
):
    """List the applications the current user has granted access to."""
    return [ConsentResponse.from_consent(consent) for consent in await list_user_consents(db, user.user_id)]


@router.delete("/consents/{client_id}", response_model=ConsentRevokedResponse)
async def revoke_my_consent(
    client_id: str,
    db: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user()),
):
    """Revoke the current user's grant to an application."""
    await revoke_consent(db, client_id, user.user_id)
    return ConsentRevokedResponse(client_id=client_id)
