"""Реферальная программа: проверка кодов, история и рейтинги."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from refpoints.errors import NotFound, ValidationFailed
from refpoints.models import ReferralEarning, ReferralEarningType, User
from refpoints.repositories import (
    get_user_by_id,
    get_user_by_ref_code,
    list_all_links_with_email,
    list_links_with_email,
    list_referral_earnings,
    referral_points_by_pair,
)

from .ledger import window_start
from .platform_settings import PlatformSettingsService
from .referral_codes import ReferralCodeGenerator


@dataclass(slots=True)
class ReferredUser:
    """Приглашённый пользователь и сколько он принёс рефереру."""

    referred_id: int
    referred_user: str
    referral_date: datetime
    points_earned: float = 0.0


@dataclass(slots=True)
class ReferralSummary:
    referrals: list[ReferredUser] = field(default_factory=list)
    total_points: float = 0.0


@dataclass(slots=True)
class TopReferrer:
    referrer_id: int
    total_points: float = 0.0
    referrals: list[ReferredUser] = field(default_factory=list)


def parse_earning_type(value: str | None) -> ReferralEarningType | None:
    if not value:
        return None
    try:
        return ReferralEarningType(value)
    except ValueError:
        allowed = ", ".join(kind.value for kind in ReferralEarningType)
        raise ValidationFailed(f"filter must be one of: {allowed}") from None


class ReferralService:
    """Реферальная система, работающая через БД."""

    def __init__(
        self,
        settings_service: PlatformSettingsService | None = None,
        code_generator: ReferralCodeGenerator | None = None,
    ) -> None:
        self._settings = settings_service or PlatformSettingsService()
        self._codes = code_generator or ReferralCodeGenerator()

    async def _require_user(self, session: AsyncSession, user_id: int) -> User:
        user = await get_user_by_id(session, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def generate_code(self, session: AsyncSession, user: User) -> str:
        return await self._codes.assign(session, user)

    async def validate_code(self, session: AsyncSession, code: str) -> User:
        referrer = await get_user_by_ref_code(session, code.strip()) if code else None
        if referrer is None:
            raise NotFound("Invalid referral code")
        return referrer

    async def history(
        self,
        session: AsyncSession,
        user_id: int,
        *,
        kind: str | None = None,
        days: int | None = None,
    ) -> Sequence[ReferralEarning]:
        """Начисления, где пользователь выступает реферером; окно только из настроенных значений."""

        earning_type = parse_earning_type(kind)
        await self._require_user(session, user_id)
        if days is not None:
            rates = await self._settings.resolve(session)
            if days not in rates.duration_filter_data:
                raise ValidationFailed(
                    f"days must be one of {list(rates.duration_filter_data)}"
                )
        return await list_referral_earnings(
            session,
            user_id,
            earning_type=earning_type,
            since=window_start(days),
        )

    async def your_referrals(self, session: AsyncSession, user_id: int) -> ReferralSummary:
        await self._require_user(session, user_id)
        links = await list_links_with_email(session, user_id)
        points = await referral_points_by_pair(session, referrer_id=user_id)
        summary = ReferralSummary()
        for link, email in links:
            earned = points.get((user_id, link.referred_id), 0.0)
            summary.referrals.append(
                ReferredUser(
                    referred_id=link.referred_id,
                    referred_user=email,
                    referral_date=link.created_at,
                    points_earned=earned,
                )
            )
        summary.referrals.sort(key=lambda item: item.points_earned, reverse=True)
        summary.total_points = sum(points.values())
        return summary

    async def top_referrers(self, session: AsyncSession, limit: int = 10) -> list[TopReferrer]:
        if limit <= 0:
            raise ValidationFailed("limit must be greater than zero")
        links = await list_all_links_with_email(session)
        points = await referral_points_by_pair(session)
        ranking: dict[int, TopReferrer] = {}
        for link, email in links:
            entry = ranking.setdefault(link.referrer_id, TopReferrer(referrer_id=link.referrer_id))
            earned = points.get((link.referrer_id, link.referred_id), 0.0)
            entry.total_points += earned
            entry.referrals.append(
                ReferredUser(
                    referred_id=link.referred_id,
                    referred_user=email,
                    referral_date=link.created_at,
                    points_earned=earned,
                )
            )
        ordered = sorted(ranking.values(), key=lambda item: item.total_points, reverse=True)
        for entry in ordered:
            entry.referrals.sort(key=lambda item: item.points_earned, reverse=True)
        return ordered[:limit]


__all__ = [
    "ReferralService",
    "ReferralSummary",
    "ReferredUser",
    "TopReferrer",
    "parse_earning_type",
]
