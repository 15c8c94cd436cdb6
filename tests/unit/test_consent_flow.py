"""Unit tests for the consent capture flow."""

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from idp_console.consent.flow import ConsentErrorCode, ConsentState, decide_consent, present_consent
from idp_console.consent.service import get_consent, list_user_consents, record_consent, revoke_consent
from idp_console.exceptions import ExternalServiceError, NotFound
from idp_console.oauth_client.request import parse_create_request
from idp_console.oauth_client.service import create_client, update_client

REDIRECT = "https://portal.acme.io/cb?code=abc&state=xyz"


@pytest.fixture
def gateway():
    gateway = AsyncMock()
    gateway.submit_consent = AsyncMock(return_value=REDIRECT)
    return gateway


@pytest_asyncio.fixture
async def registered(db):
    client, _ = await create_client(
        db,
        parse_create_request(
            {"client_name": "Acme Portal", "redirect_uris": ["https://portal.acme.io/cb"]}
        ),
        client_id="portal",
    )
    return client


class TestPresentConsent:
    @pytest.mark.asyncio
    async def test_unknown_client_checked_before_code(self, db, gateway):
        view = await present_consent(db, "en", "missing", None, "openid")
        assert view.state == ConsentState.ERROR
        assert view.error == ConsentErrorCode.CLIENT_NOT_FOUND
        gateway.submit_consent.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_client_id(self, db):
        view = await present_consent(db, "en", None, "code-1", "openid")
        assert view.error == ConsentErrorCode.CLIENT_NOT_FOUND

    @pytest.mark.asyncio
    async def test_missing_code(self, db, registered):
        view = await present_consent(db, "en", "portal", "", "openid")
        assert view.state == ConsentState.ERROR
        assert view.error == ConsentErrorCode.MISSING_CODE
        assert view.client_name == "Acme Portal"

    @pytest.mark.asyncio
    async def test_disabled_client_is_not_found(self, db, registered):
        await update_client(db, "portal", {"disabled": True})
        view = await present_consent(db, "en", "portal", "code-1", "openid")
        assert view.error == ConsentErrorCode.CLIENT_NOT_FOUND

    @pytest.mark.asyncio
    async def test_presented_with_resolved_scopes(self, db, registered):
        view = await present_consent(db, "zh", "portal", "code-1", "openid email custom")
        assert view.state == ConsentState.PRESENTED
        assert [scope.display_name for scope in view.scopes] == ["登录", "电子邮件地址", "custom"]

    @pytest.mark.asyncio
    async def test_defaults_to_client_scopes(self, db, registered):
        view = await present_consent(db, "en", "portal", "code-1", None)
        assert view.scope == "openid profile email"
        assert len(view.scopes) == 3


class TestDecideConsent:
    @pytest.mark.asyncio
    async def test_accept_records_consent(self, db, registered, end_user, gateway):
        user, _ = end_user
        view = await present_consent(db, "en", "portal", "code-1", "openid email")
        view = await decide_consent(db, gateway, view, user, accept=True, cookies={"a": "b"})
        assert view.state == ConsentState.REDIRECT
        assert view.redirect_uri == REDIRECT
        gateway.submit_consent.assert_awaited_once_with(
            consent_code="code-1", accept=True, scope="openid email", cookies={"a": "b"}
        )
        consent = await get_consent(db, "portal", user.user_id)
        assert consent.scopes == ["openid", "email"]

    @pytest.mark.asyncio
    async def test_deny_never_writes(self, db, registered, end_user, gateway):
        user, _ = end_user
        view = await present_consent(db, "en", "portal", "code-1", "openid")
        view = await decide_consent(db, gateway, view, user, accept=False)
        assert view.state == ConsentState.REDIRECT
        assert await get_consent(db, "portal", user.user_id) is None

    @pytest.mark.asyncio
    async def test_upstream_failure_returns_to_presented(self, db, registered, end_user, gateway):
        user, _ = end_user
        gateway.submit_consent.side_effect = ExternalServiceError("upstream said 500", 500)
        view = await present_consent(db, "en", "portal", "code-1", "openid")
        view = await decide_consent(db, gateway, view, user, accept=True)
        assert view.state == ConsentState.PRESENTED
        assert view.error == ConsentErrorCode.AUTHORIZATION_FAILED
        assert view.redirect_uri is None
        assert await get_consent(db, "portal", user.user_id) is None

    @pytest.mark.asyncio
    async def test_local_write_failure_still_redirects(self, db, registered, end_user, gateway):
        user, _ = end_user
        view = await present_consent(db, "en", "portal", "code-1", "openid")
        failing = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")))
        with patch("idp_console.consent.flow.record_consent", failing):
            view = await decide_consent(db, gateway, view, user, accept=True)
        assert view.state == ConsentState.REDIRECT
        assert view.redirect_uri == REDIRECT
        assert view.error is None
        failing.assert_awaited_once()
        assert await get_consent(db, "portal", user.user_id) is None

    @pytest.mark.asyncio
    async def test_error_view_is_not_submitted(self, db, end_user, gateway):
        user, _ = end_user
        view = await present_consent(db, "en", "missing", "code-1", "openid")
        view = await decide_consent(db, gateway, view, user, accept=True)
        assert view.state == ConsentState.ERROR
        gateway.submit_consent.assert_not_called()


class TestConsentRecords:
    @pytest.mark.asyncio
    async def test_upsert_replaces_scopes(self, db, registered, end_user):
        user, _ = end_user
        first = await record_consent(db, "portal", user.user_id, ["openid", "email"])
        second = await record_consent(db, "portal", user.user_id, ["openid"])
        assert first.id == second.id
        assert second.scopes == ["openid"]
        assert len(await list_user_consents(db, user.user_id)) == 1

    @pytest.mark.asyncio
    async def test_revoke_deletes(self, db, registered, end_user):
        user, _ = end_user
        await record_consent(db, "portal", user.user_id, ["openid"])
        assert await revoke_consent(db, "portal", user.user_id) == 1
        assert await get_consent(db, "portal", user.user_id) is None
        with pytest.raises(NotFound):
            await revoke_consent(db, "portal", user.user_id)
