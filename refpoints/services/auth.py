"""Вход, ротация refresh-токенов и проверка доступа."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from refpoints.errors import Forbidden, Unauthorized, ValidationFailed
from refpoints.models import User
from refpoints.repositories import (
    add_refresh_token,
    consume_refresh_token,
    delete_refresh_token,
    get_refresh_token,
    get_user_by_email,
    get_user_by_id,
    purge_expired_tokens,
)
from refpoints.utils.security import (
    ACCESS,
    REFRESH,
    IssuedToken,
    identity_claims,
    issue_token,
    verify_password,
    verify_token,
)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True, slots=True)
class TokenPair:
    access: IssuedToken
    refresh: IssuedToken


def user_identity(user: User) -> dict:
    """Минимальный набор claims: идентификатор и дата создания."""

    created_at = user.created_at.isoformat() if user.created_at else None
    return {"sub": str(user.id), "created_at": created_at}


def _as_datetime(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


class AuthService:
    """Состояния: аноним → access действителен → access истёк, refresh жив → аноним."""

    async def _issue_pair(self, session: AsyncSession, identity: dict, user_id: int) -> TokenPair:
        access = issue_token(identity, ACCESS)
        refresh = issue_token(identity, REFRESH)
        await add_refresh_token(
            session,
            jti=refresh.jti,
            user_id=user_id,
            expires_at=_as_datetime(refresh.expires_at),
        )
        return TokenPair(access=access, refresh=refresh)

    async def login(self, session: AsyncSession, email: str | None, password: str | None) -> tuple[User, TokenPair]:
        if not email or not password:
            raise ValidationFailed("email and password are required")
        user = await get_user_by_email(session, email)
        if user is None:
            raise Unauthorized(INVALID_CREDENTIALS)
        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.info("Неудачный вход пользователя {user}", user=user.id)
            raise Unauthorized(INVALID_CREDENTIALS)

        await purge_expired_tokens(session, user.id, datetime.now(timezone.utc))
        pair = await self._issue_pair(session, user_identity(user), user.id)
        await session.commit()
        logger.info("Пользователь {user} вошёл", user=user.id)
        return user, pair

    async def authenticate(self, session: AsyncSession, access_token: str | None) -> User:
        """Пользователь по access-токену; при любой проблеме Unauthorized."""

        check = verify_token(access_token, ACCESS)
        if not check.ok:
            raise Unauthorized(f"access {check.reason}")
        try:
            user_id = int(check.claims["sub"])
        except (KeyError, TypeError, ValueError):
            raise Unauthorized("access token is invalid") from None
        user = await get_user_by_id(session, user_id)
        if user is None:
            raise Unauthorized("access token is invalid")
        return user

    async def refresh(self, session: AsyncSession, refresh_token: str | None) -> TokenPair:
        """Обменивает refresh-токен на новую пару; старый токен больше не принимается."""

        if not refresh_token:
            raise Unauthorized("No refresh token provided")
        check = verify_token(refresh_token, REFRESH)
        if not check.ok:
            raise Forbidden("Invalid refresh token")
        claims = check.claims
        jti = claims.get("jti")
        stored = await get_refresh_token(session, jti) if jti else None
        if stored is None or str(stored.user_id) != str(claims.get("sub")):
            logger.warning("Повторное или чужое использование refresh-токена {jti}", jti=jti)
            raise Forbidden("Invalid refresh token")

        user_id = stored.user_id
        if not await consume_refresh_token(session, jti):
            # Параллельный запрос уже обменял этот токен.
            await session.rollback()
            logger.warning("Гонка за refresh-токен {jti}", jti=jti)
            raise Forbidden("Invalid refresh token")
        pair = await self._issue_pair(session, identity_claims(claims), user_id)
        await session.commit()
        logger.info("Ротация токенов пользователя {user}", user=user_id)
        return pair

    async def logout(self, session: AsyncSession, refresh_token: str | None) -> None:
        check = verify_token(refresh_token, REFRESH)
        if not check.ok or not check.claims.get("jti"):
            return
        if await delete_refresh_token(session, check.claims["jti"]):
            await session.commit()


__all__ = ["AuthService", "INVALID_CREDENTIALS", "TokenPair", "user_identity"]
