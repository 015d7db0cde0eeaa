"""Read-only view over the mutable runtime settings table."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from signon.config import settings
from signon.crud.setting import setting_crud

logger = logging.getLogger(__name__)

OPENID_CONNECT_SETTINGS_KEY = "plugin_openid_connect"
STORE_ACCESS_TOKEN_KEY = "store_access_token_in_cookie"


class SettingsStore:
    """Runtime settings, re-read from the database on every call.

    Nothing is memoised: an administrator changing a row is observed by the
    very next request without restarting the process. Writes go through
    ``setting_crud`` directly (admin API); this class has no write path.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, key: str, default: Any = None) -> Any:
        value = await setting_crud.get_value(self._db, key)
        return default if value is None else value

    async def openid_connect(self) -> dict:
        """The ``plugin_openid_connect`` settings block (``{"providers": {...}}``)."""
        value = await self.get(OPENID_CONNECT_SETTINGS_KEY, {})
        if not isinstance(value, dict):
            logger.warning(
                "Ignoring malformed %s setting of type %s",
                OPENID_CONNECT_SETTINGS_KEY,
                type(value).__name__,
            )
            return {}
        return value

    async def store_access_token_in_cookie(self) -> bool:
        value = await self.get(STORE_ACCESS_TOKEN_KEY, settings.OIDC_STORE_ACCESS_TOKEN_IN_COOKIE)
        return bool(value)
