"""Генерация уникальных реферальных кодов."""

from __future__ import annotations

import secrets

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import get_settings
from refpoints.errors import Conflict, NotFound
from refpoints.models import User
from refpoints.repositories import find_taken_codes


class ReferralCodeGenerator:
    """Подбирает hex-код, которого ещё нет в таблице пользователей.

    Кандидаты проверяются пачкой одним запросом. Проверка не защищает от
    гонки двух регистраций, поэтому окончательно уникальность держит
    unique-индекс на ``users.referral_code``: вызывающий код повторяет
    вставку с новым кодом при IntegrityError.
    """

    def __init__(self, code_bytes: int | None = None, batch_size: int | None = None) -> None:
        cfg = get_settings().referral
        self._code_bytes = code_bytes or cfg.code_bytes
        self._batch_size = batch_size or cfg.batch_size
        self.max_insert_attempts = cfg.max_insert_attempts

    def candidates(self) -> list[str]:
        return [secrets.token_hex(self._code_bytes) for _ in range(self._batch_size)]

    async def generate(self, session: AsyncSession) -> str:
        while True:
            batch = self.candidates()
            taken = await find_taken_codes(session, batch)
            for code in batch:
                if code not in taken:
                    return code
            logger.debug("Все {count} кандидатов заняты, новая пачка", count=len(batch))

    async def assign(self, session: AsyncSession, user: User) -> str:
        """Возвращает код пользователя, при отсутствии закрепляет новый."""

        if user.referral_code:
            return user.referral_code
        user_id = user.id
        for attempt in range(1, self.max_insert_attempts + 1):
            code = await self.generate(session)
            user.referral_code = code
            session.add(user)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.warning(
                    "Код {code} занят параллельно, попытка {attempt}", code=code, attempt=attempt
                )
                user = await session.get(User, user_id)
                if user is None:
                    raise NotFound("User not found")
                if user.referral_code:
                    return user.referral_code
                continue
            await session.refresh(user)
            logger.info("Пользователю {user} выдан код {code}", user=user_id, code=code)
            return code
        raise Conflict("Could not assign a unique referral code, try again")


__all__ = ["ReferralCodeGenerator"]
