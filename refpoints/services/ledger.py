"""Журналы очков: начисления игрока, доход реферера и пересчёт баланса.

Журналы только дополняются и являются источником истины; ``User.balance``
всего лишь кеш, который пересчитывается по запросу.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Sequence

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from refpoints.errors import NotFound, ValidationFailed
from refpoints.models import (
    Earning,
    EarningType,
    GameOutcome,
    GameTransaction,
    ReferralEarning,
    ReferralEarningType,
    User,
)
from refpoints.repositories import (
    add_earning,
    add_game_transaction,
    add_referral_earning,
    get_user_by_id,
    list_earnings,
    set_balance,
    sum_player_points,
    sum_referral_points,
)

from .commission import calculate_commission, platform_cut
from .platform_settings import PlatformSettingsService

DECISIONS = tuple(outcome.value for outcome in GameOutcome)


@dataclass(slots=True)
class Settlement:
    """Строки, записанные одной транзакцией по итогу партии."""

    player_entry: Earning
    transaction: GameTransaction
    referral_entry: ReferralEarning | None = None

    @property
    def entries(self) -> list[Earning | ReferralEarning]:
        rows: list[Earning | ReferralEarning] = [self.player_entry]
        if self.referral_entry is not None:
            rows.append(self.referral_entry)
        return rows


def _require_amount(value: float | None, name: str, *, positive: bool = True) -> float:
    if value is None:
        raise ValidationFailed(f"{name} is required")
    try:
        amount = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationFailed(f"{name} must be a number") from exc
    if amount != amount or amount in (float("inf"), float("-inf")):
        raise ValidationFailed(f"{name} must be a finite number")
    if positive and amount <= 0:
        raise ValidationFailed(f"{name} must be greater than zero")
    return amount


def window_start(days: int | None) -> datetime | None:
    if days is None:
        return None
    return datetime.now(timezone.utc) - timedelta(days=days)


class LedgerService:
    """Запись в журналы и расчёт баланса."""

    def __init__(self, settings_service: PlatformSettingsService | None = None) -> None:
        self._settings = settings_service or PlatformSettingsService()

    async def _require_user(self, session: AsyncSession, user_id: int | None) -> User:
        if user_id is None:
            raise ValidationFailed("user_id is required")
        user = await get_user_by_id(session, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def record_player_earning(
        self,
        session: AsyncSession,
        user_id: int,
        kind: EarningType,
        amount: float,
    ) -> Earning:
        """Одна строка журнала игрока; кеш баланса не трогается."""

        amount = _require_amount(amount, "amount", positive=False)
        user = await self._require_user(session, user_id)
        entry = await add_earning(session, user_id=user.id, earning_type=kind, points=amount)
        await session.commit()
        await session.refresh(entry)
        return entry

    async def record_referral_earning(
        self,
        session: AsyncSession,
        referrer_id: int,
        referred_id: int,
        kind: ReferralEarningType,
        amount: float,
    ) -> ReferralEarning:
        """Доход реферера; пишется только для его собственного приглашённого."""

        amount = _require_amount(amount, "amount", positive=False)
        referrer = await self._require_user(session, referrer_id)
        referred = await self._require_user(session, referred_id)
        if referred.referred_by != referrer.id:
            raise ValidationFailed("referred user was not invited by this referrer")
        entry = await add_referral_earning(
            session,
            referrer_id=referrer.id,
            referred_id=referred.id,
            earning_type=kind,
            points=amount,
        )
        await session.commit()
        await session.refresh(entry)
        return entry

    async def record_deposit(self, session: AsyncSession, user_id: int, amount: float) -> Earning:
        amount = _require_amount(amount, "Balance")
        user = await self._require_user(session, user_id)
        entry = await self.record_player_earning(session, user.id, EarningType.DEPOSIT, amount)
        logger.info("Депозит {amount} для пользователя {user}", amount=amount, user=user.id)
        return entry

    async def record_game_play(self, session: AsyncSession, user_id: int, amount: float) -> Earning:
        """Списывает стоимость партии с игрока."""

        amount = _require_amount(amount, "balance")
        user = await self._require_user(session, user_id)
        return await self.record_player_earning(session, user.id, EarningType.GAME_PLAYED, -amount)

    async def settle_game_outcome(
        self,
        session: AsyncSession,
        user_id: int,
        decision: str | None,
        stake: float | None,
        *,
        game_name: str = "default",
    ) -> Settlement:
        if not isinstance(decision, str) or not decision.strip():
            raise ValidationFailed("decision is required")
        decision = decision.strip().lower()
        if decision not in DECISIONS:
            raise ValidationFailed("decision must be 'win' or 'lose'")
        stake = _require_amount(stake, "stake_amount")
        user = await self._require_user(session, user_id)

        if decision == GameOutcome.WIN:
            player_entry = await add_earning(
                session, user_id=user.id, earning_type=EarningType.GAME_PLAYED, points=stake
            )
            transaction = await add_game_transaction(
                session,
                user_id=user.id,
                game_name=game_name,
                outcome=GameOutcome.WIN.value,
                points_spent=stake,
                platform_earnings=0.0,
                referrer_earnings=0.0,
            )
            await session.commit()
            logger.info("Выигрыш {stake} пользователя {user}", stake=stake, user=user.id)
            return Settlement(player_entry=player_entry, transaction=transaction)

        rates = await self._settings.resolve(session)
        referral_entry = None
        commission = 0.0
        if user.referred_by is not None:
            commission = calculate_commission(
                stake, rates.platform_earn_percentage, rates.referral_earn_percentage
            )
            referral_entry = await add_referral_earning(
                session,
                referrer_id=user.referred_by,
                referred_id=user.id,
                earning_type=ReferralEarningType.GAME_PLAYED,
                points=commission,
            )
        player_entry = await add_earning(
            session, user_id=user.id, earning_type=EarningType.GAME_PLAYED, points=-stake
        )
        transaction = await add_game_transaction(
            session,
            user_id=user.id,
            game_name=game_name,
            outcome=GameOutcome.LOSE.value,
            points_spent=stake,
            platform_earnings=platform_cut(stake, rates.platform_earn_percentage),
            referrer_earnings=commission,
        )
        await session.commit()
        logger.info(
            "Проигрыш {stake} пользователя {user}, комиссия {commission} рефереру {referrer}",
            stake=stake,
            user=user.id,
            commission=commission,
            referrer=user.referred_by,
        )
        return Settlement(
            player_entry=player_entry,
            transaction=transaction,
            referral_entry=referral_entry,
        )

    async def recompute_balance(self, session: AsyncSession, user_id: int) -> float:
        """Сумма журнала игрока и дохода реферера, сохраняется в User.balance."""

        user = await self._require_user(session, user_id)
        balance = await sum_player_points(session, user.id) + await sum_referral_points(
            session, user.id
        )
        if user.balance != balance:
            await set_balance(session, user, balance)
        return balance

    async def earnings_history(
        self,
        session: AsyncSession,
        user_id: int,
        *,
        days: int | None = None,
    ) -> Sequence[Earning]:
        user = await self._require_user(session, user_id)
        if days is not None:
            rates = await self._settings.resolve(session)
            if days not in rates.duration_filter_data:
                raise ValidationFailed(
                    f"days must be one of {list(rates.duration_filter_data)}"
                )
        return await list_earnings(session, user.id, since=window_start(days))


__all__ = ["DECISIONS", "LedgerService", "Settlement", "window_start"]
