"""Глобальные сервисы и зависимости refpoints."""

from __future__ import annotations

from config.settings import get_settings
from .services.auth import AuthService
from .services.ledger import LedgerService
from .services.platform_settings import PlatformSettingsService
from .services.referral_codes import ReferralCodeGenerator
from .services.referral_service import ReferralService
from .services.registration import RegistrationService
from .utils.cache import configure_cache

settings = get_settings()

configure_cache()

platform_settings = PlatformSettingsService()
code_generator = ReferralCodeGenerator()
ledger_service = LedgerService(platform_settings)
registration_service = RegistrationService(platform_settings, code_generator)
referral_service = ReferralService(platform_settings, code_generator)
auth_service = AuthService()

__all__ = [
    "auth_service",
    "code_generator",
    "ledger_service",
    "platform_settings",
    "referral_service",
    "registration_service",
    "settings",
]
