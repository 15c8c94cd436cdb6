import os
import sys
import asyncio
import secrets
from datetime import timedelta
from loguru import logger
from sqlalchemy import select
from idp_console.database import get_session, utcnow
import idp_console.database.orms  # noqa: F401
from idp_console.permissions import Permissioning
from idp_console.user.schemas import User, UserSession

SESSION_LIFETIME = timedelta(days=1)


async def create_admin(username: str = "admin", email: str = None):
    async with get_session() as session:
        admin = (
            (
                await session.execute(
                    select(User).where(
                        User.permissions_bitmask.op("&")(Permissioning.admin.bitmask) != 0
                    )
                )
            )
            .scalars()
            .first()
        )
        if admin:
            logger.info(f"Admin user already exists: {admin.username} ({admin.user_id})")
            return

        logger.info("No admin user found, creating one...")
        user = User(username=username, email=email or os.getenv("ADMIN_EMAIL"))
        user.permissions_bitmask = 0
        Permissioning.enable(user, Permissioning.admin)
        session.add(user)
        await session.flush()

        token = secrets.token_urlsafe(32)
        session.add(
            UserSession(
                token_hash=UserSession.hash_token(token),
                user_id=user.user_id,
                expires_at=utcnow() + SESSION_LIFETIME,
            )
        )
        await session.commit()
        logger.success(f"Created admin user {username} ({user.user_id})")
        logger.warning(
            "Printing a one-day session token to the console; use it as a bearer token "
            "to bootstrap, then sign in normally"
        )
        print(token)


if __name__ == "__main__":
    asyncio.run(create_admin(*sys.argv[1:3]))
