"""Реферальные связи (кто кого пригласил)."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from refpoints.models import ReferralLink, User


async def add_referral_link(
    session: AsyncSession,
    *,
    referrer_id: int,
    referred_id: int,
    signup_bonus: float,
) -> ReferralLink:
    link = ReferralLink(referrer_id=referrer_id, referred_id=referred_id, signup_bonus=signup_bonus)
    session.add(link)
    await session.flush()
    return link



async def list_links_with_email(
    session: AsyncSession, referrer_id: int
) -> Sequence[tuple[ReferralLink, str]]:
    """Связи реферера вместе с email приглашённых."""

    stmt = (
        select(ReferralLink, User.email)
        .join(User, col(User.id) == col(ReferralLink.referred_id))
        .where(ReferralLink.referrer_id == referrer_id)
        .order_by(col(ReferralLink.created_at))
    )
    result = await session.exec(stmt)
    return [(link, email) for link, email in result.all()]


async def list_all_links_with_email(session: AsyncSession) -> Sequence[tuple[ReferralLink, str]]:
    stmt = (
        select(ReferralLink, User.email)
        .join(User, col(User.id) == col(ReferralLink.referred_id))
        .order_by(col(ReferralLink.created_at))
    )
    result = await session.exec(stmt)
    return [(link, email) for link, email in result.all()]


__all__ = [
    "add_referral_link",
    "list_all_links_with_email",
    "list_links_with_email",
]
