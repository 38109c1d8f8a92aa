"""Управление платформой: настройки и депозиты.

Только для операторов платформы. Ролей пока нет, поэтому доступ есть у любого
вошедшего пользователя; без сессии все маршруты отвечают 401.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from refpoints.context import ledger_service, platform_settings
from refpoints.services.platform_settings import PlatformRates
from refpoints.web.deps import get_current_user, get_db_session
from refpoints.web.schemas import (
    DepositRequest,
    EarningOut,
    EarningResponse,
    PlatformSettingsIn,
    PlatformSettingsOut,
)

router = APIRouter(prefix="/cms", tags=["cms"], dependencies=[Depends(get_current_user)])


@router.get("/settings", response_model=PlatformSettingsOut)
async def read_settings(session: AsyncSession = Depends(get_db_session)) -> PlatformSettingsOut:
    row = await platform_settings.get_or_create(session)
    return PlatformSettingsOut.model_validate(row)


@router.put("/settings", response_model=PlatformSettingsOut)
async def replace_settings(
    payload: PlatformSettingsIn,
    session: AsyncSession = Depends(get_db_session),
) -> PlatformSettingsOut:
    """Меняет комиссии и бонусы для всех. Операторский маршрут."""

    rates = PlatformRates(
        new_referral_points=payload.new_referral_points,
        platform_earn_percentage=payload.platform_earn_percentage,
        referral_earn_percentage=payload.referral_earn_percentage,
        duration_filter_data=tuple(payload.duration_filter_data),
    )
    row = await platform_settings.replace(session, rates)
    return PlatformSettingsOut.model_validate(row)


@router.post("/balance/{user_id}", response_model=EarningResponse, status_code=status.HTTP_201_CREATED)
async def deposit(
    user_id: int,
    payload: DepositRequest,
    session: AsyncSession = Depends(get_db_session),
) -> EarningResponse:
    """Зачисляет очки любому пользователю. Операторский маршрут, не для игроков."""

    entry = await ledger_service.record_deposit(session, user_id, payload.balance)
    return EarningResponse(message="Balance added", earning=EarningOut.model_validate(entry))


__all__ = ["router"]
