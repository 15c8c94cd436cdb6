"""Unit tests for redirect URI rules and credential generation."""

import re

import pytest

from idp_console.oauth_client.util import (
    RedirectUriErrorCode,
    generate_client_id,
    generate_client_secret,
    normalize_redirect_uris,
    validate_redirect_uri,
    validate_redirect_uris,
)


class TestValidateRedirectUris:
    def test_empty_list(self):
        result = validate_redirect_uris([])
        assert not result.valid
        assert result.codes == [RedirectUriErrorCode.EMPTY_LIST]

    @pytest.mark.parametrize(
        "uri",
        [
            "https://app.acme.io/callback",
            "https://app.acme.io:8443/oauth/callback",
            "http://localhost:3000/callback",
            "http://127.0.0.1/callback",
            "http://[::1]:8080/callback",
        ],
    )
    def test_valid_uris(self, uri):
        result = validate_redirect_uris([uri])
        assert result.valid
        assert result.errors == []

    @pytest.mark.parametrize(
        "uri",
        ["http://app.acme.io/callback", "com.acme.app://callback", "ftp://localhost.acme.io/cb"],
    )
    def test_insecure_scheme(self, uri):
        result = validate_redirect_uris([uri])
        assert result.codes == [RedirectUriErrorCode.INSECURE_SCHEME]

    @pytest.mark.parametrize(
        "uri",
        ["https://*.acme.io/callback", "https://app.acme.io/callback?next=1"],
    )
    def test_wildcards(self, uri):
        assert validate_redirect_uris([uri]).codes == [RedirectUriErrorCode.WILDCARD_NOT_ALLOWED]

    @pytest.mark.parametrize(
        "uri",
        ["https://app.acme.io/callback#section", "https://app.acme.io/callback#"],
    )
    def test_fragments(self, uri):
        assert validate_redirect_uris([uri]).codes == [RedirectUriErrorCode.FRAGMENT_NOT_ALLOWED]

    @pytest.mark.parametrize(
        "uri",
        ["not a url", "/relative/path", "https://", "https://app.acme.io:notaport/cb", "https://[::1/cb"],
    )
    def test_malformed_reports_only_malformed(self, uri):
        violations = validate_redirect_uri(uri)
        assert [v.code for v in violations] == [RedirectUriErrorCode.MALFORMED_URI]

    def test_accumulates_across_uris(self):
        result = validate_redirect_uris(
            [
                "http://app.acme.io/cb",
                "https://app.acme.io/cb#frag",
                "https://app.acme.io/ok",
                "garbage",
            ]
        )
        assert not result.valid
        assert result.codes == [
            RedirectUriErrorCode.INSECURE_SCHEME,
            RedirectUriErrorCode.FRAGMENT_NOT_ALLOWED,
            RedirectUriErrorCode.MALFORMED_URI,
        ]
        assert len(result.errors) == 3

    def test_multiple_violations_on_one_uri(self):
        codes = [v.code for v in validate_redirect_uri("http://*.acme.io/cb#x")]
        assert codes == [
            RedirectUriErrorCode.INSECURE_SCHEME,
            RedirectUriErrorCode.WILDCARD_NOT_ALLOWED,
            RedirectUriErrorCode.FRAGMENT_NOT_ALLOWED,
        ]


class TestNormalizeRedirectUris:
    def test_trim_drop_empty_dedupe(self):
        assert normalize_redirect_uris(
            [" https://a.acme.io/cb ", "", "   ", "https://a.acme.io/cb", "https://b.acme.io/cb"]
        ) == ["https://a.acme.io/cb", "https://b.acme.io/cb"]

    def test_dedupe_is_case_sensitive(self):
        assert normalize_redirect_uris(["https://a.acme.io/CB", "https://a.acme.io/cb"]) == [
            "https://a.acme.io/CB",
            "https://a.acme.io/cb",
        ]


class TestGenerators:
    def test_client_id_is_uuid4(self):
        client_id = generate_client_id()
        assert re.fullmatch(
            r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}", client_id
        )

    def test_client_secret_is_64_hex(self):
        secret = generate_client_secret()
        assert re.fullmatch(r"[0-9a-f]{64}", secret)

    def test_values_are_unique(self):
        assert len({generate_client_id() for _ in range(200)}) == 200
        assert len({generate_client_secret() for _ in range(200)}) == 200
