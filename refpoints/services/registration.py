"""Регистрация пользователя с необязательным реферальным кодом."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from refpoints.errors import Conflict, NotFound, ValidationFailed
from refpoints.models import ReferralEarning, ReferralEarningType, ReferralLink, User
from refpoints.repositories import (
    add_referral_earning,
    add_referral_link,
    add_user,
    get_user_by_email,
    get_user_by_ref_code,
)
from refpoints.utils.security import hash_password

from .platform_settings import PlatformSettingsService
from .referral_codes import ReferralCodeGenerator

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


@dataclass(slots=True)
class Registration:
    """Результат регистрации: пользователь и, если был код, связь с начислением."""

    user: User
    referral_link: ReferralLink | None = None
    referral_earning: ReferralEarning | None = None

    @property
    def referrer_id(self) -> int | None:
        return self.user.referred_by


def normalize_email(email: str | None) -> str:
    if not email or not email.strip():
        raise ValidationFailed("email is required")
    email = email.strip().lower()
    if not _EMAIL_RE.match(email):
        raise ValidationFailed("email is not valid")
    return email


class RegistrationService:
    """Создаёт пользователя, реферальную связь и бонус рефереру одной транзакцией."""

    def __init__(
        self,
        settings_service: PlatformSettingsService | None = None,
        code_generator: ReferralCodeGenerator | None = None,
    ) -> None:
        self._settings = settings_service or PlatformSettingsService()
        self._codes = code_generator or ReferralCodeGenerator()

    async def register_user(
        self,
        session: AsyncSession,
        email: str | None,
        password: str | None,
        referral_code: str | None = None,
    ) -> Registration:
        email = normalize_email(email)
        if not password:
            raise ValidationFailed("password is required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailed(f"password must be at least {MIN_PASSWORD_LENGTH} characters")

        if await get_user_by_email(session, email) is not None:
            raise Conflict(f"{email} already exists")

        referrer_id: int | None = None
        referral_code = (referral_code or "").strip() or None
        if referral_code:
            referrer = await get_user_by_ref_code(session, referral_code)
            if referrer is None:
                raise NotFound("referral code not found")
            referrer_id = referrer.id

        password_hash = await asyncio.to_thread(hash_password, password)
        bonus = None
        if referrer_id is not None:
            bonus = (await self._settings.resolve(session)).new_referral_points

        for attempt in range(1, self._codes.max_insert_attempts + 1):
            code = await self._codes.generate(session)
            try:
                registration = await self._insert(
                    session,
                    email=email,
                    password_hash=password_hash,
                    code=code,
                    referrer_id=referrer_id,
                    bonus=bonus,
                )
            except IntegrityError:
                await session.rollback()
                if await get_user_by_email(session, email) is not None:
                    raise Conflict(f"{email} already exists")
                logger.warning(
                    "Код {code} занят параллельной регистрацией, попытка {attempt}",
                    code=code,
                    attempt=attempt,
                )
                continue
            except Exception:
                # Пользователь, связь и бонус не должны сохраниться по отдельности.
                await session.rollback()
                raise
            logger.info(
                "Зарегистрирован пользователь {user}, реферер {referrer}",
                user=registration.user.id,
                referrer=registration.referrer_id,
            )
            return registration
        raise Conflict("Could not assign a unique referral code, try again")

    async def _insert(
        self,
        session: AsyncSession,
        *,
        email: str,
        password_hash: str,
        code: str,
        referrer_id: int | None,
        bonus: float | None,
    ) -> Registration:
        user = await add_user(
            session,
            email=email,
            password_hash=password_hash,
            referral_code=code,
            referred_by=referrer_id,
        )
        registration = Registration(user=user)
        if referrer_id is not None and bonus is not None:
            registration.referral_link = await add_referral_link(
                session,
                referrer_id=referrer_id,
                referred_id=user.id,
                signup_bonus=bonus,
            )
            registration.referral_earning = await add_referral_earning(
                session,
                referrer_id=referrer_id,
                referred_id=user.id,
                earning_type=ReferralEarningType.NEW_REFERRAL,
                points=bonus,
            )
        await session.commit()
        await session.refresh(user)
        return registration


__all__ = ["MIN_PASSWORD_LENGTH", "Registration", "RegistrationService", "normalize_email"]
