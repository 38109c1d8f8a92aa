"""Глобальные настройки refpoints.

Настройки разделены по доменам (база, безопасность, реферальная программа,
платформенные ставки, кеш), вся конфигурация загружается из переменных
окружения через Pydantic Settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import (
    BaseModel,
    Field,
    NonNegativeFloat,
    PositiveInt,
    SecretStr,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent
ACCESSIBLE_ENV_FILE = BASE_DIR / "config" / "runtime.env"
DEFAULT_ENV_FILE = BASE_DIR / ".env"
ENV_FILE = ACCESSIBLE_ENV_FILE if ACCESSIBLE_ENV_FILE.exists() else DEFAULT_ENV_FILE


class DatabaseSettings(BaseModel):
    """DSN async-драйвера SQLAlchemy; по умолчанию файл SQLite рядом с миграциями."""

    dsn: str = Field(
        "sqlite+aiosqlite:///./database/refpoints.db",
        description="Например sqlite+aiosqlite:///:memory: для тестов",
    )
    echo: bool = False


class SecuritySettings(BaseModel):
    """JWT-пары, cookie и параметры bcrypt."""

    access_token_secret: SecretStr = Field(..., description="Секрет access-токенов")
    refresh_token_secret: SecretStr = Field(..., description="Секрет refresh-токенов")
    jwt_algorithm: str = "HS256"
    access_ttl_minutes: PositiveInt = 15
    refresh_ttl_days: PositiveInt = 7
    access_cookie_name: str = "access_token"
    refresh_cookie_name: str = "refresh_token"
    cookie_secure: bool = False
    bcrypt_rounds: int = Field(12, ge=4, le=31)

    @field_validator("refresh_token_secret")
    @classmethod
    def _secrets_differ(cls, value: SecretStr, info):
        access = info.data.get("access_token_secret")
        if access is not None and access.get_secret_value() == value.get_secret_value():
            raise ValueError("access и refresh секреты должны отличаться")
        return value


class ReferralSettings(BaseModel):
    """Генерация реферальных кодов."""

    code_bytes: PositiveInt = Field(3, description="Случайных байт в коде (hex → 2 символа на байт)")
    batch_size: PositiveInt = Field(10, description="Кандидатов за один запрос к БД")
    max_insert_attempts: PositiveInt = Field(
        5, description="Повторы вставки при гонке за уникальный код"
    )


class PlatformDefaults(BaseModel):
    """Значения платформенных настроек, пока запись в БД не создана."""

    new_referral_points: NonNegativeFloat = 100
    platform_earn_percentage: float = Field(10, ge=0, le=100)
    referral_earn_percentage: float = Field(2, ge=0, le=100)
    duration_filter_data: list[PositiveInt] = Field(default_factory=lambda: [1, 7, 30])


class CacheSettings(BaseModel):
    """Настройки кеша aiocache (in-memory)."""

    ttl_seconds: int = 30


class ServerSettings(BaseModel):
    """Параметры uvicorn."""

    host: str = "127.0.0.1"
    port: int = 4000


class AppSettings(BaseSettings):
    """Главный контейнер настроек refpoints."""

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: Literal["dev", "prod"] = "dev"
    log_level: str = "INFO"
    log_json: bool = False
    log_file: str | None = Field(None, description="Файл логов с суточной ротацией")
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings
    referral: ReferralSettings = ReferralSettings()
    platform: PlatformDefaults = PlatformDefaults()
    cache: CacheSettings = CacheSettings()
    server: ServerSettings = ServerSettings()

    @property
    def is_production(self) -> bool:
        """True, если сервис запущен в продовой среде."""

        return self.environment == "prod"


# Читается при первом обращении, чтобы тесты успели выставить окружение.
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Настройки процесса; без секретов SECURITY__* падает с ValidationError."""

    global _settings
    if _settings is None:
        _settings = AppSettings()  # type: ignore[call-arg]
    return _settings


__all__ = [
    "AppSettings",
    "CacheSettings",
    "DatabaseSettings",
    "PlatformDefaults",
    "ReferralSettings",
    "SecuritySettings",
    "ServerSettings",
    "get_settings",
]
