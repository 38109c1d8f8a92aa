"""Функции для работы с таблицей пользователей."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from refpoints.models import User


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    return await session.get(User, user_id)


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    stmt = select(User).where(User.email == email.strip().lower())
    result = await session.exec(stmt)
    return result.one_or_none()


async def get_user_by_ref_code(session: AsyncSession, code: str) -> Optional[User]:
    stmt = select(User).where(User.referral_code == code)
    result = await session.exec(stmt)
    return result.one_or_none()


async def find_taken_codes(session: AsyncSession, codes: Iterable[str]) -> set[str]:
    """Возвращает коды из набора, которые уже закреплены за пользователями."""

    stmt = select(User.referral_code).where(col(User.referral_code).in_(list(codes)))
    result = await session.exec(stmt)
    return {code for code in result.all() if code}


async def add_user(
    session: AsyncSession,
    *,
    email: str,
    password_hash: str,
    referral_code: str | None,
    referred_by: int | None = None,
) -> User:
    """Добавляет пользователя в текущую транзакцию (без commit)."""

    user = User(
        email=email.strip().lower(),
        password_hash=password_hash,
        referral_code=referral_code,
        referred_by=referred_by,
    )
    session.add(user)
    await session.flush()
    return user


async def set_balance(session: AsyncSession, user: User, balance: float) -> User:
    user.balance = balance
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


__all__ = [
    "add_user",
    "find_taken_codes",
    "get_user_by_email",
    "get_user_by_id",
    "get_user_by_ref_code",
    "set_balance",
]
