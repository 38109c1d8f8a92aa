"""Журналы начислений и аудит партий."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, func, select

from refpoints.models import (
    Earning,
    EarningType,
    GameTransaction,
    ReferralEarning,
    ReferralEarningType,
)


async def add_earning(
    session: AsyncSession,
    *,
    user_id: int,
    earning_type: EarningType,
    points: float,
) -> Earning:
    earning = Earning(user_id=user_id, earning_type=earning_type, points_earned=points)
    session.add(earning)
    await session.flush()
    return earning


async def add_referral_earning(
    session: AsyncSession,
    *,
    referrer_id: int,
    referred_id: int,
    earning_type: ReferralEarningType,
    points: float,
) -> ReferralEarning:
    earning = ReferralEarning(
        referrer_id=referrer_id,
        referred_id=referred_id,
        earning_type=earning_type,
        points_earned=points,
    )
    session.add(earning)
    await session.flush()
    return earning


async def add_game_transaction(
    session: AsyncSession,
    *,
    user_id: int,
    game_name: str,
    outcome: str,
    points_spent: float,
    platform_earnings: float,
    referrer_earnings: float,
) -> GameTransaction:
    transaction = GameTransaction(
        user_id=user_id,
        game_name=game_name,
        outcome=outcome,
        points_spent=points_spent,
        platform_earnings=platform_earnings,
        referrer_earnings=referrer_earnings,
    )
    session.add(transaction)
    await session.flush()
    return transaction


async def sum_player_points(session: AsyncSession, user_id: int) -> float:
    stmt = select(func.coalesce(func.sum(Earning.points_earned), 0.0)).where(
        Earning.user_id == user_id
    )
    return float((await session.exec(stmt)).one() or 0.0)


async def sum_referral_points(session: AsyncSession, referrer_id: int) -> float:
    stmt = select(func.coalesce(func.sum(ReferralEarning.points_earned), 0.0)).where(
        ReferralEarning.referrer_id == referrer_id
    )
    return float((await session.exec(stmt)).one() or 0.0)


async def list_earnings(
    session: AsyncSession,
    user_id: int,
    *,
    since: datetime | None = None,
) -> Sequence[Earning]:
    stmt = select(Earning).where(Earning.user_id == user_id)
    if since is not None:
        stmt = stmt.where(col(Earning.created_at) >= since)
    stmt = stmt.order_by(col(Earning.created_at).desc(), col(Earning.id).desc())
    return list((await session.exec(stmt)).all())


async def list_referral_earnings(
    session: AsyncSession,
    referrer_id: int,
    *,
    earning_type: ReferralEarningType | None = None,
    since: datetime | None = None,
) -> Sequence[ReferralEarning]:
    stmt = select(ReferralEarning).where(ReferralEarning.referrer_id == referrer_id)
    if earning_type is not None:
        stmt = stmt.where(ReferralEarning.earning_type == earning_type)
    if since is not None:
        stmt = stmt.where(col(ReferralEarning.created_at) >= since)
    stmt = stmt.order_by(col(ReferralEarning.created_at).desc(), col(ReferralEarning.id).desc())
    return list((await session.exec(stmt)).all())


async def referral_points_by_pair(
    session: AsyncSession,
    *,
    referrer_id: int | None = None,
) -> dict[tuple[int, int], float]:
    """Сумма дохода реферера по каждому приглашённому: {(referrer, referred): points}."""

    stmt = select(
        ReferralEarning.referrer_id,
        ReferralEarning.referred_id,
        func.coalesce(func.sum(ReferralEarning.points_earned), 0.0),
    )
    if referrer_id is not None:
        stmt = stmt.where(ReferralEarning.referrer_id == referrer_id)
    stmt = stmt.group_by(ReferralEarning.referrer_id, ReferralEarning.referred_id)
    rows = (await session.exec(stmt)).all()
    return {(referrer, referred): float(total or 0.0) for referrer, referred, total in rows}


__all__ = [
    "add_earning",
    "add_game_transaction",
    "add_referral_earning",
    "list_earnings",
    "list_referral_earnings",
    "referral_points_by_pair",
    "sum_player_points",
    "sum_referral_points",
]
