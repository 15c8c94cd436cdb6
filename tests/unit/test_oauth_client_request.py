"""Unit tests for the admin request models."""

import pytest

from idp_console.exceptions import ValidationError
from idp_console.oauth_client.request import parse_create_request, parse_update_request


def _fields(exc_info):
    return [error.field for error in exc_info.value.errors]


class TestCreateRequest:
    def test_defaults(self):
        args = parse_create_request(
            {"client_name": "  Acme  ", "redirect_uris": ["https://app.acme.io/cb"]}
        )
        assert args.client_name == "Acme"
        assert args.grant_types == ["authorization_code"]
        assert args.response_types == ["code"]
        assert args.token_endpoint_auth_method == "client_secret_basic"
        assert args.scopes == ["openid", "profile", "email"]
        assert not args.is_public
        assert args.client_type == "web"

    def test_redirect_uris_normalized_before_validation(self):
        args = parse_create_request(
            {
                "client_name": "Acme",
                "redirect_uris": [
                    " https://app.acme.io/cb ",
                    "",
                    "https://app.acme.io/cb",
                    "http://localhost:3000/cb",
                ],
            }
        )
        assert args.redirect_uris == ["https://app.acme.io/cb", "http://localhost:3000/cb"]

    def test_whitespace_only_redirects_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_create_request({"client_name": "Acme", "redirect_uris": ["  ", ""]})
        assert _fields(exc_info) == ["redirect_uris"]

    def test_every_violation_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_create_request(
                {
                    "client_name": "",
                    "redirect_uris": ["http://app.acme.io/cb", "https://app.acme.io/ok"],
                    "logo_uri": "not a url",
                    "contacts": "ops@acme.io, nope",
                    "grant_types": ["magic"],
                }
            )
        fields = _fields(exc_info)
        assert "client_name" in fields
        assert "redirect_uris.0" in fields
        assert "redirect_uris.1" not in fields
        assert "logo_uri" in fields
        assert "contacts.1" in fields
        assert "grant_types.0" in fields
        insecure = next(e for e in exc_info.value.errors if e.field == "redirect_uris.0")
        assert "HTTPS" in insecure.message
        assert not insecure.message.startswith("Value error")

    def test_name_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_create_request({"client_name": "x" * 257, "redirect_uris": ["https://a.acme.io/cb"]})
        assert _fields(exc_info) == ["client_name"]

    def test_public_client(self):
        args = parse_create_request(
            {
                "client_name": "CLI",
                "redirect_uris": ["http://127.0.0.1:9000/cb"],
                "token_endpoint_auth_method": "none",
                "contacts": "ops@acme.io,dev@acme.io",
                "client_uri": "  ",
            }
        )
        assert args.is_public
        assert args.client_type == "public"
        assert args.contacts == ["ops@acme.io", "dev@acme.io"]
        assert args.client_uri is None

    @pytest.mark.parametrize(
        "field", ["client_uri", "logo_uri", "tos_uri", "policy_uri", "jwks_uri"]
    )
    @pytest.mark.parametrize(
        "url",
        ["javascript://x.io/%0Aalert(document.cookie)", "data://x.io/text", "ftp://files.acme.io/logo.png"],
    )
    def test_link_fields_require_web_scheme(self, field, url):
        with pytest.raises(ValidationError) as exc_info:
            parse_create_request(
                {"client_name": "Acme", "redirect_uris": ["https://a.acme.io/cb"], field: url}
            )
        assert field in _fields(exc_info)

    def test_link_fields_accept_http_and_https(self):
        args = parse_create_request(
            {
                "client_name": "Acme",
                "redirect_uris": ["https://a.acme.io/cb"],
                "client_uri": "HTTPS://acme.io",
                "logo_uri": "http://cdn.acme.io/logo.png",
            }
        )
        assert args.client_uri == "HTTPS://acme.io"
        assert args.logo_uri == "http://cdn.acme.io/logo.png"

    def test_non_object_body(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_create_request(["not", "an", "object"])
        assert _fields(exc_info) == ["body"]


class TestUpdateRequest:
    def test_only_sent_fields_are_changes(self):
        args = parse_update_request({"name": " Renamed "})
        assert args.changes() == {"name": "Renamed"}

    def test_redirect_alias(self):
        args = parse_update_request({"redirectURLs": ["https://a.acme.io/cb", "https://a.acme.io/cb"]})
        assert args.changes() == {"redirect_uris": ["https://a.acme.io/cb"]}

    def test_explicit_nulls_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_update_request({"name": None, "disabled": None, "type": None, "redirect_uris": None})
        assert sorted(_fields(exc_info)) == ["disabled", "name", "redirect_uris", "type"]

    def test_nullable_fields_clear(self):
        args = parse_update_request({"icon": None, "metadata": "  "})
        assert args.changes() == {"icon": None, "metadata": None}

    def test_invalid_type(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_update_request({"type": "daemon"})
        assert _fields(exc_info) == ["type"]

    def test_icon_requires_web_scheme(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_update_request({"icon": "javascript://x.io/%0Aalert(1)"})
        assert _fields(exc_info) == ["icon"]
        args = parse_update_request({"icon": "https://cdn.acme.io/icon.png"})
        assert args.changes() == {"icon": "https://cdn.acme.io/icon.png"}
