"""Регистрация, вход и ротация токенов."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from refpoints.context import auth_service, registration_service
from refpoints.web.deps import (
    clear_auth_cookies,
    get_db_session,
    get_refresh_cookie,
    set_auth_cookies,
)
from refpoints.web.schemas import LoginRequest, MessageResponse, RegisterRequest, UserOut, UserResponse

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    referral_code: str | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    registration = await registration_service.register_user(
        session, payload.email, payload.password, referral_code
    )
    return UserResponse(message="User registered", user=UserOut.model_validate(registration.user))


@router.post("/login", response_model=UserResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user, pair = await auth_service.login(session, payload.email, payload.password)
    set_auth_cookies(response, pair)
    return UserResponse(message="Logged in", user=UserOut.model_validate(user))


@router.post("/refresh", response_model=MessageResponse)
async def refresh(
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    pair = await auth_service.refresh(session, get_refresh_cookie(request))
    set_auth_cookies(response, pair)
    return MessageResponse(message="Tokens refreshed")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await auth_service.logout(session, get_refresh_cookie(request))
    clear_auth_cookies(response)
    return MessageResponse(message="Logged out")


__all__ = ["router"]
