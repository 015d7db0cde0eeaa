"""CRUD operations for runtime application settings."""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from signon.models.setting import ApplicationSetting


class SettingCRUD:
    """CRUD operations for ApplicationSetting model."""

    @staticmethod
    async def get_value(db: AsyncSession, key: str) -> Optional[Any]:
        """Read the stored JSON value of a setting, bypassing the identity map."""
        result = await db.execute(
            select(ApplicationSetting.value).where(ApplicationSetting.key == key)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def set_value(db: AsyncSession, key: str, value: Any) -> ApplicationSetting:
        """Insert or replace a setting."""
        result = await db.execute(
            select(ApplicationSetting).where(ApplicationSetting.key == key)
        )
        setting = result.scalar_one_or_none()
        if setting is None:
            setting = ApplicationSetting(key=key, value=value)
            db.add(setting)
        else:
            setting.value = value
        await db.commit()
        await db.refresh(setting)
        return setting


setting_crud = SettingCRUD()
