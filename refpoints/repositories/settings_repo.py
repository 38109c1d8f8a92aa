"""Чтение и запись единственной строки платформенных настроек."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from refpoints.models import SETTINGS_ROW_ID, PlatformSettings


async def get_platform_settings(session: AsyncSession) -> Optional[PlatformSettings]:
    return await session.get(PlatformSettings, SETTINGS_ROW_ID)


async def save_platform_settings(session: AsyncSession, row: PlatformSettings) -> PlatformSettings:
    row.touch()
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return row


__all__ = ["get_platform_settings", "save_platform_settings"]
