"""
Credential generation and redirect URI rules for OAuth clients.
"""

import secrets
import uuid
from enum import Enum
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel

LOOPBACK_HOSTS = ("localhost", "127.0.0.1", "::1")
CLIENT_SECRET_BYTES = 32


def generate_client_id() -> str:
    """Generate an opaque, globally unique client ID (random UUID4)."""
    return str(uuid.uuid4())


def generate_client_secret() -> str:
    """Generate a 256-bit client secret, as 64 lowercase hex characters."""
    return secrets.token_hex(CLIENT_SECRET_BYTES)


class RedirectUriErrorCode(str, Enum):
    EMPTY_LIST = "EmptyList"
    MALFORMED_URI = "MalformedUri"
    INSECURE_SCHEME = "InsecureScheme"
    WILDCARD_NOT_ALLOWED = "WildcardNotAllowed"
    FRAGMENT_NOT_ALLOWED = "FragmentNotAllowed"


class RedirectUriViolation(BaseModel):
    code: RedirectUriErrorCode
    uri: Optional[str] = None
    message: str


class RedirectUriValidation(BaseModel):
    valid: bool
    errors: List[str] = []
    violations: List[RedirectUriViolation] = []

    @property
    def codes(self) -> List[RedirectUriErrorCode]:
        return [violation.code for violation in self.violations]


def _split_absolute(uri: str):
    """
    Parse an absolute URI, returning None when it has no scheme/host or is unparsable.
    """
    try:
        parts = urlsplit(uri)
        # Accessing .port validates it.
        _ = parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    if any(ch.isspace() for ch in uri):
        return None
    return parts


def is_web_url(value: str) -> bool:
    """
    Absolute http(s) URL, safe to render as a link or image source.
    """
    parts = _split_absolute(value)
    return parts is not None and parts.scheme.lower() in ("http", "https")


def validate_redirect_uri(uri: str) -> List[RedirectUriViolation]:
    """
    Check a single redirect URI, returning every rule it breaks.
    """
    parts = _split_absolute(uri)
    if parts is None:
        return [
            RedirectUriViolation(
                code=RedirectUriErrorCode.MALFORMED_URI,
                uri=uri,
                message=f"Invalid redirect URI format: {uri}",
            )
        ]
    violations = []
    if parts.scheme.lower() != "https" and parts.hostname.lower() not in LOOPBACK_HOSTS:
        violations.append(
            RedirectUriViolation(
                code=RedirectUriErrorCode.INSECURE_SCHEME,
                uri=uri,
                message=f"Redirect URI must use HTTPS unless it targets localhost: {uri}",
            )
        )
    if "*" in uri or "?" in uri:
        violations.append(
            RedirectUriViolation(
                code=RedirectUriErrorCode.WILDCARD_NOT_ALLOWED,
                uri=uri,
                message=f"Redirect URI cannot contain wildcards: {uri}",
            )
        )
    # An empty trailing "#" still counts as a fragment component.
    if parts.fragment or "#" in uri:
        violations.append(
            RedirectUriViolation(
                code=RedirectUriErrorCode.FRAGMENT_NOT_ALLOWED,
                uri=uri,
                message=f"Redirect URI cannot contain fragments: {uri}",
            )
        )
    return violations


def validate_redirect_uris(uris: Iterable[str]) -> RedirectUriValidation:
    """
    Validate a list of redirect URIs, accumulating all violations.
    """
    uris = list(uris)
    if not uris:
        violation = RedirectUriViolation(
            code=RedirectUriErrorCode.EMPTY_LIST,
            message="At least one redirect URI is required",
        )
        return RedirectUriValidation(valid=False, errors=[violation.message], violations=[violation])
    violations = []
    for uri in uris:
        violations.extend(validate_redirect_uri(uri))
    return RedirectUriValidation(
        valid=not violations,
        errors=[violation.message for violation in violations],
        violations=violations,
    )


def normalize_redirect_uris(uris: Iterable[str]) -> List[str]:
    """
    Trim, drop empties and de-duplicate (case-sensitive, first occurrence wins).
    """
    seen = set()
    normalized = []
    for uri in uris:
        uri = uri.strip()
        if uri and uri not in seen:
            seen.add(uri)
            normalized.append(uri)
    return normalized


def normalize_optional_input(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_contacts(contacts: Optional[str]) -> List[str]:
    """Split a comma-separated contact string."""
    if not contacts:
        return []
    return [contact.strip() for contact in contacts.split(",") if contact.strip()]
