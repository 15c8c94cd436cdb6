"""
Application factory and ASGI entrypoint.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

import idp_console.database.orms  # noqa: F401
from idp_console.admin.router import router as admin_router
from idp_console.config import load_branding, settings
from idp_console.consent.router import router as consent_router
from idp_console.database import engine
from idp_console.exceptions import register_exception_handlers
from idp_console.oauth_client.router import router as oauth_client_router
from idp_console.scope.router import router as scope_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {app.state.branding.app_name} console")
    yield
    await settings.redis_client.close()
    await engine.dispose()
    logger.info("Connections closed.")


def create_app() -> FastAPI:
    app = FastAPI(title="IDP Console", lifespan=lifespan)
    app.state.branding = load_branding(settings)
    register_exception_handlers(app)

    app.include_router(oauth_client_router, prefix="/oauth-clients", tags=["OAuth Clients"])
    app.include_router(admin_router, prefix="/admin", tags=["Admin"])
    app.include_router(scope_router, tags=["Scopes"])
    app.include_router(consent_router, tags=["Consent"])

    @app.get("/ping")
    async def ping():
        return {"message": "pong"}

    return app


app = create_app()
