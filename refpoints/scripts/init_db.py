"""Утилита для первичной инициализации базы данных и настроек платформы."""

from __future__ import annotations

import asyncio

from loguru import logger

from refpoints.db import engine, get_session_maker, init_db
from refpoints.services.platform_settings import PlatformSettingsService


async def _bootstrap() -> None:
    await init_db()
    async with get_session_maker()() as session:
        row = await PlatformSettingsService().get_or_create(session)
    logger.info(
        "База готова, бонус за реферала {bonus}",
        bonus=row.new_referral_points,
    )
    await engine.dispose()


def main() -> None:
    asyncio.run(_bootstrap())


if __name__ == "__main__":
    main()
