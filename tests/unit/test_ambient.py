"""Unit tests for the cache wrapper, branding and locale helpers."""

import json
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError
from redis.exceptions import ConnectionError as RedisConnectionError

from idp_console.config import Settings, load_branding
from idp_console.i18n import resolve_locale
from idp_console.safe_redis import SafeRedis


class TestSafeRedis:
    @pytest.mark.asyncio
    async def test_fail_open(self):
        safe = SafeRedis("redis://127.0.0.1:1/0", timeout=0.1)
        safe.client.get = AsyncMock(side_effect=RedisConnectionError("down"))
        assert await safe.get("idp:client:portal") is None

    @pytest.mark.asyncio
    async def test_passthrough(self):
        safe = SafeRedis("redis://127.0.0.1:1/0", default=False)
        safe.client.set = AsyncMock(return_value=True)
        assert await safe.set("k", "v", ex=5) is True
        safe.client.set.assert_awaited_once_with("k", "v", ex=5)


class TestBranding:
    def test_defaults(self):
        branding = load_branding(Settings(app_name="Acme ID", branding_file=None))
        assert branding.app_name == "Acme ID"
        assert branding.platform_name == "Acme ID"
        assert "en" in branding.service_description

    def test_file_overrides(self, tmp_path):
        path = tmp_path / "branding.json"
        path.write_text(json.dumps({"company_name": "Acme Corp", "unknown": "ignored"}))
        branding = load_branding(Settings(branding_file=str(path)))
        assert branding.company_name == "Acme Corp"
        with pytest.raises(ValidationError):
            branding.company_name = "changed"

    def test_broken_file_is_ignored(self, tmp_path):
        path = tmp_path / "branding.json"
        path.write_text("{not json")
        branding = load_branding(Settings(app_name="Acme ID", branding_file=str(path)))
        assert branding.app_name == "Acme ID"


class TestResolveLocale:
    @pytest.mark.parametrize(
        "requested,expected",
        [("en", "en"), ("zh", "zh"), ("fr", "en"), (None, "en"), ("", "en")],
    )
    def test_resolve(self, requested, expected):
        assert resolve_locale(requested) == expected
