"""Pydantic-модели запросов и ответов HTTP API."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PositiveInt

from refpoints.models import EarningType, ReferralEarningType


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str


# ============================================================================
# Пользователи и вход
# ============================================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class UserOut(ORMModel):
    id: int
    email: str
    referral_code: Optional[str] = None
    referred_by: Optional[int] = None
    balance: float
    created_at: datetime


class UserResponse(BaseModel):
    message: str
    user: UserOut


# ============================================================================
# Журналы и игра
# ============================================================================

class EarningOut(ORMModel):
    id: int
    user_id: int
    earning_type: EarningType
    points_earned: float
    created_at: datetime


class ReferralEarningOut(ORMModel):
    id: int
    referrer_id: int
    referred_id: int
    earning_type: ReferralEarningType
    points_earned: float
    created_at: datetime


class GameTransactionOut(ORMModel):
    id: str
    user_id: int
    game_name: str
    outcome: str
    points_spent: float
    platform_earnings: float
    referrer_earnings: float
    created_at: datetime


class DepositRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    balance: float = Field(..., gt=0, alias="Balance", description="Очки для зачисления")


class GamePlayRequest(BaseModel):
    balance: float = Field(..., gt=0, description="Стоимость партии")


class GameDecisionRequest(BaseModel):
    decision: Literal["win", "lose"]
    stake_amount: float = Field(..., gt=0)
    game_name: str = Field("default", min_length=1, max_length=64)


class EarningResponse(BaseModel):
    message: str
    earning: EarningOut


class SettlementResponse(BaseModel):
    message: str
    earning: EarningOut
    referral_earning: Optional[ReferralEarningOut] = None
    transaction: GameTransactionOut


class BalanceResponse(BaseModel):
    current_balance: float


class EarningsHistoryResponse(BaseModel):
    earnings: list[EarningOut]


# ============================================================================
# Реферальная программа
# ============================================================================

class ReferralCodeResponse(BaseModel):
    message: str
    referral_code: str


class ReferralHistoryResponse(BaseModel):
    referral_history: list[ReferralEarningOut]


class ReferredUserOut(ORMModel):
    referred_id: int
    referred_user: str
    referral_date: datetime
    points_earned: float


class ReferralListResponse(BaseModel):
    referrals: list[ReferredUserOut]
    total_points: float


class TopReferrerOut(ORMModel):
    referrer_id: int
    total_points: float
    referrals: list[ReferredUserOut]


class TopReferralsResponse(BaseModel):
    top_referrals: list[TopReferrerOut]


# ============================================================================
# Платформенные настройки
# ============================================================================

class PlatformSettingsIn(BaseModel):
    new_referral_points: float = Field(..., ge=0)
    platform_earn_percentage: float = Field(..., ge=0, le=100)
    referral_earn_percentage: float = Field(..., ge=0, le=100)
    duration_filter_data: list[PositiveInt] = Field(..., min_length=1)


class PlatformSettingsOut(ORMModel):
    new_referral_points: float
    platform_earn_percentage: float
    referral_earn_percentage: float
    duration_filter_data: list[int]
    updated_at: datetime
