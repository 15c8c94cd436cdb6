"""
Client for the authorization server's consent endpoint.
"""

import asyncio
import json
from functools import lru_cache
from typing import Any, Dict, Optional

import aiohttp
from loguru import logger

from idp_console.config import settings
from idp_console.exceptions import ExternalServiceError


@lru_cache()
def get_gateway():
    return AuthorizationServerClient(
        base_url=settings.authorization_server_url,
        consent_path=settings.consent_path,
        timeout=settings.consent_timeout_seconds,
    )


def parse_consent_response(status: int, body: Any) -> str:
    """
    Extract the redirect target from a consent endpoint response, or raise.
    """
    if status < 200 or status >= 300:
        message = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                message = error.get("message")
            elif error:
                message = str(error)
            message = message or body.get("message")
        raise ExternalServiceError(
            f"Consent endpoint returned {status}: {message or body!r}",
            upstream_status=status,
        )
    if not isinstance(body, dict):
        raise ExternalServiceError(f"Unexpected consent response body: {body!r}", status)

    # Some deployments wrap the payload in {"data": {...}}.
    if isinstance(body.get("data"), dict):
        body = body["data"]

    error = body.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise ExternalServiceError(f"Consent endpoint error: {message}", status)

    for key in ("uri", "url", "redirect_uri"):
        uri = body.get(key)
        if isinstance(uri, str) and uri:
            return uri
    raise ExternalServiceError(f"Consent response missing redirect target: {body!r}", status)


class AuthorizationServerClient:
    def __init__(self, base_url: str, consent_path: str, timeout: float = 10.0):
        self.consent_url = base_url.rstrip("/") + "/" + consent_path.lstrip("/")
        self.timeout = timeout

    async def submit_consent(
        self,
        consent_code: str,
        accept: bool,
        scope: Optional[str] = None,
        cookies: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Forward the user's decision, returning the URI the browser should go to next.
        """
        payload = {"accept": accept, "consent_code": consent_code}
        if scope:
            payload["scope"] = scope
        try:
            async with aiohttp.ClientSession(
                cookies=cookies or {},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as session:
                async with session.post(self.consent_url, json=payload) as response:
                    text = await response.text()
                    try:
                        body = json.loads(text) if text else None
                    except ValueError:
                        if 200 <= response.status < 300:
                            raise ExternalServiceError(
                                f"Malformed consent response: {text[:200]}",
                                upstream_status=response.status,
                            )
                        body = text[:200]
                    uri = parse_consent_response(response.status, body)
        except aiohttp.ClientError as exc:
            raise ExternalServiceError(f"Consent endpoint unreachable: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise ExternalServiceError("Consent endpoint timed out") from exc
        logger.info(f"Consent decision accept={accept} forwarded to authorization server")
        return uri
