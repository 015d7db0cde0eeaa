"""Unit tests for SettingsStore."""

from unittest.mock import patch

import pytest

from signon.crud.setting import setting_crud
from signon.services.settings_store import (
    OPENID_CONNECT_SETTINGS_KEY,
    STORE_ACCESS_TOKEN_KEY,
    SettingsStore,
)


@pytest.mark.unit
class TestSettingsStore:
    """Tests for reading runtime settings."""

    @pytest.mark.asyncio
    async def test_missing_key_returns_default(self, db_session):
        store = SettingsStore(db_session)

        assert await store.get("nope", "fallback") == "fallback"
        assert await store.openid_connect() == {}

    @pytest.mark.asyncio
    async def test_reads_latest_value(self, db_session):
        store = SettingsStore(db_session)

        await setting_crud.set_value(db_session, OPENID_CONNECT_SETTINGS_KEY, {"providers": {}})
        assert await store.openid_connect() == {"providers": {}}

        providers = {"providers": {"google": {"identifier": "id", "secret": "s"}}}
        await setting_crud.set_value(db_session, OPENID_CONNECT_SETTINGS_KEY, providers)
        assert await store.openid_connect() == providers

    @pytest.mark.asyncio
    async def test_malformed_block_is_ignored(self, db_session):
        await setting_crud.set_value(db_session, OPENID_CONNECT_SETTINGS_KEY, "google")

        assert await SettingsStore(db_session).openid_connect() == {}

    @pytest.mark.asyncio
    async def test_store_access_token_defaults_to_static_setting(self, db_session):
        store = SettingsStore(db_session)

        with patch("signon.services.settings_store.settings") as mock_settings:
            mock_settings.OIDC_STORE_ACCESS_TOKEN_IN_COOKIE = True
            assert await store.store_access_token_in_cookie() is True
            mock_settings.OIDC_STORE_ACCESS_TOKEN_IN_COOKIE = False
            assert await store.store_access_token_in_cookie() is False

    @pytest.mark.asyncio
    async def test_store_access_token_runtime_override(self, db_session):
        store = SettingsStore(db_session)

        await setting_crud.set_value(db_session, STORE_ACCESS_TOKEN_KEY, True)
        assert await store.store_access_token_in_cookie() is True

        await setting_crud.set_value(db_session, STORE_ACCESS_TOKEN_KEY, False)
        assert await store.store_access_token_in_cookie() is False
