"""Хранилище действующих refresh-токенов (по jti)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from refpoints.models import RefreshToken


async def add_refresh_token(
    session: AsyncSession,
    *,
    jti: str,
    user_id: int,
    expires_at: datetime,
) -> RefreshToken:
    row = RefreshToken(jti=jti, user_id=user_id, expires_at=expires_at)
    session.add(row)
    await session.flush()
    return row


async def get_refresh_token(session: AsyncSession, jti: str) -> Optional[RefreshToken]:
    return await session.get(RefreshToken, jti)


async def delete_refresh_token(session: AsyncSession, jti: str) -> bool:
    row = await session.get(RefreshToken, jti)
    if row is None:
        return False
    await session.delete(row)
    await session.flush()
    return True


async def consume_refresh_token(session: AsyncSession, jti: str) -> bool:
    """Удаляет jti одним DELETE; True только у того, кто удалил строку."""

    result = await session.execute(delete(RefreshToken).where(col(RefreshToken.jti) == jti))
    return result.rowcount == 1


async def purge_expired_tokens(session: AsyncSession, user_id: int, now: datetime) -> None:
    stmt = select(RefreshToken).where(
        RefreshToken.user_id == user_id,
        col(RefreshToken.expires_at) < now,
    )
    for row in (await session.exec(stmt)).all():
        await session.delete(row)
    await session.flush()


__all__ = [
    "add_refresh_token",
    "consume_refresh_token",
    "delete_refresh_token",
    "get_refresh_token",
    "purge_expired_tokens",
]
