"""
Request models for OAuth client administration.

Untrusted admin input is normalized and validated here, before anything reaches
the record store. Validation failures are reported field by field and nothing
is persisted for a request that fails any rule.
"""

from typing import Annotated, Any, List, Literal, Optional

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
)

from idp_console.exceptions import FieldError, ValidationError
from idp_console.oauth_client.util import (
    is_web_url,
    normalize_optional_input,
    normalize_redirect_uris,
    parse_contacts,
    validate_redirect_uri,
)

OAUTH_CLIENT_NAME_MAX_LENGTH = 256
DEFAULT_SCOPE = "openid profile email"

GrantType = Literal[
    "authorization_code",
    "password",
    "refresh_token",
    "implicit",
    "client_credentials",
    "urn:ietf:params:oauth:grant-type:jwt-bearer",
    "urn:ietf:params:oauth:grant-type:saml2-bearer",
]
ResponseType = Literal["code", "token"]
TokenEndpointAuthMethod = Literal["client_secret_basic", "client_secret_post", "none"]
ClientType = Literal["web", "public", "mobile"]


def _check_redirect_uri(uri: str) -> str:
    violations = validate_redirect_uri(uri)
    if violations:
        raise ValueError("; ".join(violation.message for violation in violations))
    return uri


RedirectUri = Annotated[str, AfterValidator(_check_redirect_uri)]


def _normalize_redirect_input(value: Any) -> Any:
    # Only clean well-typed input; anything else is left for type validation to reject.
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return normalize_redirect_uris(value)
    return value


def _check_name(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("Client name is required")
    value = value.strip()
    if len(value) > OAUTH_CLIENT_NAME_MAX_LENGTH:
        raise ValueError(
            f"Client name must be at most {OAUTH_CLIENT_NAME_MAX_LENGTH} characters"
        )
    return value


def _check_optional_url(value: Optional[str]) -> Optional[str]:
    value = normalize_optional_input(value)
    if value is not None and not is_web_url(value):
        raise ValueError("Must be an absolute http or https URL")
    return value


def _dedupe(values: List[str]) -> List[str]:
    return list(dict.fromkeys(values))


class OAuthClientCreateRequest(BaseModel):
    """Request model for registering an OAuth client."""

    model_config = ConfigDict(extra="ignore")

    client_name: str
    redirect_uris: List[RedirectUri]
    token_endpoint_auth_method: TokenEndpointAuthMethod = "client_secret_basic"
    grant_types: List[GrantType] = Field(default_factory=lambda: ["authorization_code"])
    response_types: List[ResponseType] = Field(default_factory=lambda: ["code"])
    client_uri: Optional[str] = None
    logo_uri: Optional[str] = None
    tos_uri: Optional[str] = None
    policy_uri: Optional[str] = None
    jwks_uri: Optional[str] = None
    scope: str = DEFAULT_SCOPE
    contacts: List[EmailStr] = []

    @field_validator("client_name")
    @classmethod
    def validate_client_name(cls, v):
        return _check_name(v)

    @field_validator("redirect_uris", mode="before")
    @classmethod
    def normalize_redirect_uris(cls, v):
        return _normalize_redirect_input(v)

    @field_validator("redirect_uris")
    @classmethod
    def validate_redirect_uris(cls, v):
        if not v:
            raise ValueError("At least one redirect URI is required")
        return v

    @field_validator("client_uri", "logo_uri", "tos_uri", "policy_uri", "jwks_uri")
    @classmethod
    def validate_optional_urls(cls, v):
        return _check_optional_url(v)

    @field_validator("scope")
    @classmethod
    def validate_scope(cls, v):
        v = " ".join(v.split())
        if not v:
            raise ValueError("Scope is required")
        return v

    @field_validator("contacts", mode="before")
    @classmethod
    def split_contacts(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return parse_contacts(v)
        return v

    @field_validator("grant_types")
    @classmethod
    def validate_grant_types(cls, v):
        if not v:
            raise ValueError("At least one grant type is required")
        return _dedupe(v)

    @field_validator("response_types")
    @classmethod
    def validate_response_types(cls, v):
        if not v:
            raise ValueError("At least one response type is required")
        return _dedupe(v)

    @property
    def scopes(self) -> List[str]:
        return _dedupe(self.scope.split())

    @property
    def is_public(self) -> bool:
        return self.token_endpoint_auth_method == "none"

    @property
    def client_type(self) -> str:
        return "public" if self.is_public else "web"


class OAuthClientUpdateRequest(BaseModel):
    """
    Partial update of an OAuth client.
    Only fields present in the payload are applied, see changes().
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: Optional[str] = None
    redirect_uris: Optional[List[RedirectUri]] = Field(
        default=None,
        validation_alias=AliasChoices("redirect_uris", "redirectUris", "redirectURLs"),
    )
    icon: Optional[str] = None
    metadata: Optional[str] = None
    disabled: Optional[bool] = None
    type: Optional[ClientType] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _check_name(v)

    @field_validator("redirect_uris", mode="before")
    @classmethod
    def normalize_redirect_uris(cls, v):
        return _normalize_redirect_input(v)

    @field_validator("redirect_uris")
    @classmethod
    def validate_redirect_uris(cls, v):
        if not v:
            raise ValueError("At least one redirect URI is required")
        return v

    @field_validator("icon")
    @classmethod
    def validate_icon(cls, v):
        return _check_optional_url(v)

    @field_validator("metadata")
    @classmethod
    def validate_metadata(cls, v):
        return normalize_optional_input(v)

    @field_validator("disabled")
    @classmethod
    def validate_disabled(cls, v):
        if v is None:
            raise ValueError("disabled must be a boolean")
        return v

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        if v is None:
            raise ValueError("type must be one of: web, public, mobile")
        return v

    def changes(self) -> dict:
        """Fields explicitly sent by the caller, already normalized."""
        return self.model_dump(exclude_unset=True)


def _to_validation_error(exc: PydanticValidationError) -> ValidationError:
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        errors.append(FieldError(field=field, message=message))
    return ValidationError(errors)


def _parse(model, payload: Any):
    if not isinstance(payload, dict):
        raise ValidationError([FieldError(field="body", message="Expected a JSON object")])
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise _to_validation_error(exc) from exc


def parse_create_request(payload: Any) -> OAuthClientCreateRequest:
    return _parse(OAuthClientCreateRequest, payload)


def parse_update_request(payload: Any) -> OAuthClientUpdateRequest:
    return _parse(OAuthClientUpdateRequest, payload)
