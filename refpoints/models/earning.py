"""Журналы начислений: собственные очки игрока и доход реферера."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from sqlmodel import Field

from .base import CreatedAtModel


class EarningType(str, Enum):
    DEPOSIT = "Deposit"
    GAME_PLAYED = "game_played"


class ReferralEarningType(str, Enum):
    NEW_REFERRAL = "New_Referral"
    GAME_PLAYED = "game_played"


class Earning(CreatedAtModel, table=True):
    """Строка журнала игрока (append-only)."""

    __tablename__ = "earnings"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    earning_type: EarningType
    points_earned: float


class ReferralEarning(CreatedAtModel, table=True):
    """Строка журнала реферера (append-only, отдельно от журнала игрока)."""

    __tablename__ = "referral_earnings"

    id: Optional[int] = Field(default=None, primary_key=True)
    referrer_id: int = Field(foreign_key="users.id", index=True)
    referred_id: int = Field(foreign_key="users.id", index=True)
    earning_type: ReferralEarningType
    points_earned: float


__all__ = ["Earning", "EarningType", "ReferralEarning", "ReferralEarningType"]
