"""Платформенные настройки: ленивое создание, кеш и полная замена."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import PlatformDefaults, get_settings
from refpoints.errors import ValidationFailed
from refpoints.models import PlatformSettings
from refpoints.repositories import get_platform_settings, save_platform_settings
from refpoints.utils.cache import cached_call, invalidate

CACHE_KEY = "platform-settings"


@dataclass(frozen=True, slots=True)
class PlatformRates:
    """Снимок настроек, который передаётся в расчёты вместо строки БД."""

    new_referral_points: float
    platform_earn_percentage: float
    referral_earn_percentage: float
    duration_filter_data: tuple[int, ...]

    @classmethod
    def from_row(cls, row: PlatformSettings) -> "PlatformRates":
        return cls(
            new_referral_points=row.new_referral_points,
            platform_earn_percentage=row.platform_earn_percentage,
            referral_earn_percentage=row.referral_earn_percentage,
            duration_filter_data=tuple(row.duration_filter_data),
        )

    @classmethod
    def from_defaults(cls, defaults: PlatformDefaults) -> "PlatformRates":
        return cls(
            new_referral_points=defaults.new_referral_points,
            platform_earn_percentage=defaults.platform_earn_percentage,
            referral_earn_percentage=defaults.referral_earn_percentage,
            duration_filter_data=tuple(defaults.duration_filter_data),
        )

    def as_dict(self) -> dict:
        data = asdict(self)
        data["duration_filter_data"] = list(self.duration_filter_data)
        return data


def validate_rates(rates: PlatformRates) -> None:
    if rates.new_referral_points < 0:
        raise ValidationFailed("new_referral_points must not be negative")
    for name in ("platform_earn_percentage", "referral_earn_percentage"):
        value = getattr(rates, name)
        if not 0 <= value <= 100:
            raise ValidationFailed(f"{name} must be between 0 and 100")
    if not rates.duration_filter_data:
        raise ValidationFailed("duration_filter_data must not be empty")
    if any(days <= 0 for days in rates.duration_filter_data):
        raise ValidationFailed("duration_filter_data must contain positive day counts")


class PlatformSettingsService:
    """Единственная запись настроек; отсутствие записи означает значения по умолчанию."""

    def __init__(self) -> None:
        cfg = get_settings()
        self._defaults = PlatformRates.from_defaults(cfg.platform)
        self._ttl = cfg.cache.ttl_seconds

    @property
    def defaults(self) -> PlatformRates:
        return self._defaults

    async def get_or_create(self, session: AsyncSession) -> PlatformSettings:
        row = await get_platform_settings(session)
        if row is not None:
            return row
        row = PlatformSettings(**self._defaults.as_dict())
        session.add(row)
        try:
            await session.commit()
        except IntegrityError:
            # Параллельный запрос успел создать запись первым.
            await session.rollback()
            existing = await get_platform_settings(session)
            if existing is None:
                raise
            return existing
        await session.refresh(row)
        logger.info("Созданы платформенные настройки по умолчанию")
        return row

    async def resolve(self, session: AsyncSession) -> PlatformRates:
        """Актуальные ставки (через кеш); вызывается один раз на операцию."""

        async def _load() -> dict:
            row = await get_platform_settings(session)
            rates = PlatformRates.from_row(row) if row is not None else self._defaults
            return rates.as_dict()

        data = await cached_call(CACHE_KEY, self._ttl, _load)
        return PlatformRates(
            new_referral_points=data["new_referral_points"],
            platform_earn_percentage=data["platform_earn_percentage"],
            referral_earn_percentage=data["referral_earn_percentage"],
            duration_filter_data=tuple(data["duration_filter_data"]),
        )

    async def replace(self, session: AsyncSession, rates: PlatformRates) -> PlatformSettings:
        """Полностью заменяет настройки (частичное обновление не поддерживается)."""

        validate_rates(rates)
        row = await get_platform_settings(session)
        if row is None:
            row = PlatformSettings(**rates.as_dict())
        else:
            row.new_referral_points = rates.new_referral_points
            row.platform_earn_percentage = rates.platform_earn_percentage
            row.referral_earn_percentage = rates.referral_earn_percentage
            row.duration_filter_data = list(rates.duration_filter_data)
        row = await save_platform_settings(session, row)
        await invalidate(CACHE_KEY)
        logger.info(
            "Настройки обновлены: bonus={bonus} platform={platform}% referral={referral}%",
            bonus=row.new_referral_points,
            platform=row.platform_earn_percentage,
            referral=row.referral_earn_percentage,
        )
        return row


__all__ = ["CACHE_KEY", "PlatformRates", "PlatformSettingsService", "validate_rates"]
