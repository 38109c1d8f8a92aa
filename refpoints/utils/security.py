"""JWT-пары и хеширование паролей."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict
from uuid import uuid4

import bcrypt
import jwt
from jwt import ExpiredSignatureError, InvalidTokenError

from config.settings import get_settings

settings = get_settings()

ACCESS = "access"
REFRESH = "refresh"

# Поля, которые привязаны ко времени выдачи и не переносятся в новую пару.
TIME_BOUND_CLAIMS = frozenset({"exp", "iat", "jti", "type"})

# bcrypt учитывает только первые 72 байта.
_BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True, slots=True)
class TokenCheck:
    """Результат проверки токена: claims либо причина отказа."""

    claims: Dict[str, Any] | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.claims is not None


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    jti: str | None
    expires_at: int


def _secret_for(token_type: str) -> str:
    if token_type == ACCESS:
        return settings.security.access_token_secret.get_secret_value()
    return settings.security.refresh_token_secret.get_secret_value()


def _ttl_seconds(token_type: str) -> int:
    if token_type == ACCESS:
        return settings.security.access_ttl_minutes * 60
    return settings.security.refresh_ttl_days * 24 * 60 * 60


def issue_token(
    identity: Dict[str, Any],
    token_type: str,
    *,
    ttl_seconds: int | None = None,
    secret: str | None = None,
) -> IssuedToken:
    """Подписывает identity-claims; refresh-токен получает уникальный jti."""

    now = int(time.time())
    expires_at = now + (ttl_seconds if ttl_seconds is not None else _ttl_seconds(token_type))
    payload = {key: value for key, value in identity.items() if key not in TIME_BOUND_CLAIMS}
    payload.update({"type": token_type, "iat": now, "exp": expires_at})
    jti = None
    if token_type == REFRESH:
        jti = uuid4().hex
        payload["jti"] = jti
    token = jwt.encode(
        payload,
        secret or _secret_for(token_type),
        algorithm=settings.security.jwt_algorithm,
    )
    return IssuedToken(token=token, jti=jti, expires_at=expires_at)


def verify_token(token: str | None, token_type: str, *, secret: str | None = None) -> TokenCheck:
    """Проверяет подпись, срок и тип токена. Никогда не бросает исключений."""

    if not token:
        return TokenCheck(reason="token is missing")
    try:
        claims = jwt.decode(
            token,
            secret or _secret_for(token_type),
            algorithms=[settings.security.jwt_algorithm],
            options={"require": ["exp", "iat", "sub"]},
        )
    except ExpiredSignatureError:
        return TokenCheck(reason="token has expired")
    except InvalidTokenError:
        return TokenCheck(reason="token is invalid")
    if claims.get("type") != token_type:
        return TokenCheck(reason="token is invalid")
    return TokenCheck(claims=claims)


def identity_claims(claims: Dict[str, Any]) -> Dict[str, Any]:
    """Оставляет только данные личности (sub, created_at)."""

    return {key: value for key, value in claims.items() if key not in TIME_BOUND_CLAIMS}


def _truncate(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.security.bcrypt_rounds)
    return bcrypt.hashpw(_truncate(password), salt).decode()


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_truncate(password), hashed.encode())
    except ValueError:
        # Повреждённый хеш в БД равносилен неверному паролю.
        return False


__all__ = [
    "ACCESS",
    "REFRESH",
    "IssuedToken",
    "TokenCheck",
    "hash_password",
    "identity_claims",
    "issue_token",
    "verify_password",
    "verify_token",
]
