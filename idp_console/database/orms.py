"""
Import every ORM module so relationships resolve and metadata is complete.
"""

from idp_console.user.schemas import User, UserSession  # noqa: F401
from idp_console.oauth_client.schemas import (  # noqa: F401
    OAuthAccessToken,
    OAuthClient,
    OAuthRefreshToken,
)
from idp_console.consent.schemas import OAuthConsent  # noqa: F401
from idp_console.scope.schemas import ScopeDescription  # noqa: F401
