"""Зависимости FastAPI: сессия БД, текущий пользователь и cookie."""

from __future__ import annotations

from fastapi import Depends, Request, Response
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import get_settings
from refpoints.context import auth_service
from refpoints.db import get_db_session
from refpoints.errors import Forbidden
from refpoints.models import User
from refpoints.services.auth import TokenPair

settings = get_settings()

access_cookie_scheme = APIKeyCookie(name=settings.security.access_cookie_name, auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    cookie_token: str | None = Depends(access_cookie_scheme),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
) -> User:
    """Access-токен из cookie, иначе из заголовка Authorization."""

    token = cookie_token or (credentials.credentials if credentials else None)
    return await auth_service.authenticate(session, token)


def require_owner(user_id: int, current_user: User) -> None:
    if current_user.id != user_id:
        raise Forbidden("You can only act on your own account")


def get_refresh_cookie(request: Request) -> str | None:
    return request.cookies.get(settings.security.refresh_cookie_name)


def set_auth_cookies(response: Response, pair: TokenPair) -> None:
    security = settings.security
    response.set_cookie(
        security.access_cookie_name,
        pair.access.token,
        max_age=security.access_ttl_minutes * 60,
        httponly=True,
        secure=security.cookie_secure,
        samesite="lax",
    )
    response.set_cookie(
        security.refresh_cookie_name,
        pair.refresh.token,
        max_age=security.refresh_ttl_days * 24 * 60 * 60,
        httponly=True,
        secure=security.cookie_secure,
        samesite="lax",
    )


def clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(settings.security.access_cookie_name)
    response.delete_cookie(settings.security.refresh_cookie_name)


__all__ = [
    "clear_auth_cookies",
    "get_current_user",
    "get_db_session",
    "get_refresh_cookie",
    "require_owner",
    "set_auth_cookies",
]
