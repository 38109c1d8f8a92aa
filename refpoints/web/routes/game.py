"""Игровые операции и баланс игрока."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from refpoints.context import ledger_service
from refpoints.models import User
from refpoints.web.deps import get_current_user, get_db_session, require_owner
from refpoints.web.schemas import (
    BalanceResponse,
    EarningOut,
    EarningResponse,
    EarningsHistoryResponse,
    GameDecisionRequest,
    GamePlayRequest,
    GameTransactionOut,
    ReferralEarningOut,
    SettlementResponse,
)

router = APIRouter(prefix="/game", tags=["game"])


@router.post("/play/{user_id}", response_model=EarningResponse, status_code=status.HTTP_201_CREATED)
async def play(
    user_id: int,
    payload: GamePlayRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> EarningResponse:
    require_owner(user_id, current_user)
    entry = await ledger_service.record_game_play(session, user_id, payload.balance)
    return EarningResponse(message="Game started", earning=EarningOut.model_validate(entry))


@router.post("/decision/{user_id}", response_model=SettlementResponse, status_code=status.HTTP_201_CREATED)
async def decision(
    user_id: int,
    payload: GameDecisionRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> SettlementResponse:
    require_owner(user_id, current_user)
    settlement = await ledger_service.settle_game_outcome(
        session,
        user_id,
        payload.decision,
        payload.stake_amount,
        game_name=payload.game_name,
    )
    referral_entry: Optional[ReferralEarningOut] = None
    if settlement.referral_entry is not None:
        referral_entry = ReferralEarningOut.model_validate(settlement.referral_entry)
    return SettlementResponse(
        message=f"Game settled: {payload.decision}",
        earning=EarningOut.model_validate(settlement.player_entry),
        referral_earning=referral_entry,
        transaction=GameTransactionOut.model_validate(settlement.transaction),
    )


@router.get("/balance/{user_id}", response_model=BalanceResponse)
async def balance(
    user_id: int,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> BalanceResponse:
    current = await ledger_service.recompute_balance(session, user_id)
    return BalanceResponse(current_balance=current)


@router.get("/history/{user_id}", response_model=EarningsHistoryResponse)
async def history(
    user_id: int,
    days: int | None = Query(None),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> EarningsHistoryResponse:
    rows = await ledger_service.earnings_history(session, user_id, days=days)
    return EarningsHistoryResponse(earnings=[EarningOut.model_validate(row) for row in rows])


__all__ = ["router"]
