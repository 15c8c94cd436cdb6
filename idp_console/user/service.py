"""
Session lookup and caller guards.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from idp_console.config import settings
from idp_console.database import get_db_session, utcnow
from idp_console.exceptions import Unauthorized
from idp_console.user.schemas import User, UserSession


def extract_session_token(request: Request) -> Optional[str]:
    """
    Session token from the framework's cookie, or a bearer header for API callers.
    """
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


async def get_user_from_session_token(db: AsyncSession, token: str) -> Optional[User]:
    session_row = (
        (
            await db.execute(
                select(UserSession)
                .options(joinedload(UserSession.user))
                .where(UserSession.token_hash == UserSession.hash_token(token))
            )
        )
        .unique()
        .scalar_one_or_none()
    )
    if not session_row or session_row.expires_at < utcnow():
        return None
    return session_row.user


def get_current_user(raise_not_found: bool = True):
    """
    Dependency factory resolving the signed-in user.
    """

    async def _get_current_user(
        request: Request,
        db: AsyncSession = Depends(get_db_session),
    ) -> Optional[User]:
        token = extract_session_token(request)
        user = await get_user_from_session_token(db, token) if token else None
        if not user and raise_not_found:
            raise Unauthorized()
        return user

    return _get_current_user


def require_role(*roles):
    """
    Dependency factory requiring any of the given roles.

    Missing sessions and missing roles produce the same Unauthorized error, and
    the check runs before any route handler touches the requested resource.
    """

    async def _require_role(
        user: Optional[User] = Depends(get_current_user(raise_not_found=False)),
    ) -> User:
        if user is None or not any(user.has_role(role) for role in roles):
            raise Unauthorized()
        return user

    return _require_role
