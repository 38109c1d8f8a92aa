"""Единственная запись платформенных настроек."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON
from sqlmodel import Column, Field, SQLModel

from .base import utcnow

SETTINGS_ROW_ID = 1


class PlatformSettings(SQLModel, table=True):
    """Ставки платформы; фиксированный первичный ключ допускает не больше одной строки."""

    __tablename__ = "platform_settings"

    id: int = Field(default=SETTINGS_ROW_ID, primary_key=True)
    new_referral_points: float
    platform_earn_percentage: float
    referral_earn_percentage: float
    duration_filter_data: list[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)

    def touch(self) -> None:
        self.updated_at = utcnow()


__all__ = ["PlatformSettings", "SETTINGS_ROW_ID"]
