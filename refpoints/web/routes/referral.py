"""Реферальные коды, история и рейтинг."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from refpoints.context import referral_service, registration_service
from refpoints.models import User
from refpoints.web.deps import get_current_user, get_db_session
from refpoints.web.schemas import (
    ReferralCodeResponse,
    ReferralEarningOut,
    ReferralHistoryResponse,
    ReferralListResponse,
    ReferredUserOut,
    RegisterRequest,
    TopReferralsResponse,
    TopReferrerOut,
    UserOut,
    UserResponse,
)

router = APIRouter(prefix="/referral", tags=["referral"])


@router.post(
    "/register/{referral_code}",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_with_code(
    referral_code: str,
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    registration = await registration_service.register_user(
        session, payload.email, payload.password, referral_code
    )
    return UserResponse(
        message="User registered with referral",
        user=UserOut.model_validate(registration.user),
    )


@router.post("/generate", response_model=ReferralCodeResponse)
async def generate_code(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> ReferralCodeResponse:
    code = await referral_service.generate_code(session, current_user)
    return ReferralCodeResponse(message="Referral code ready", referral_code=code)


@router.get("/validate/{referral_code}", response_model=ReferralCodeResponse)
async def validate_code(
    referral_code: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> ReferralCodeResponse:
    referrer = await referral_service.validate_code(session, referral_code)
    return ReferralCodeResponse(message="Referral code is valid", referral_code=referrer.referral_code)


@router.get("/history/{user_id}", response_model=ReferralHistoryResponse)
async def referral_history(
    user_id: int,
    filter: str | None = Query(None, description="New_Referral или game_played"),
    days: int | None = Query(None),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> ReferralHistoryResponse:
    rows = await referral_service.history(session, user_id, kind=filter, days=days)
    return ReferralHistoryResponse(
        referral_history=[ReferralEarningOut.model_validate(row) for row in rows]
    )


@router.get("/list/{user_id}", response_model=ReferralListResponse)
async def your_referrals(
    user_id: int,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> ReferralListResponse:
    summary = await referral_service.your_referrals(session, user_id)
    return ReferralListResponse(
        referrals=[ReferredUserOut.model_validate(item) for item in summary.referrals],
        total_points=summary.total_points,
    )


@router.get("/top", response_model=TopReferralsResponse)
async def top_referrers(
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> TopReferralsResponse:
    ranking = await referral_service.top_referrers(session, limit=limit)
    return TopReferralsResponse(
        top_referrals=[TopReferrerOut.model_validate(entry) for entry in ranking]
    )


__all__ = ["router"]
