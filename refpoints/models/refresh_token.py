"""Выданные и ещё не использованные refresh-токены."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field

from .base import CreatedAtModel


class RefreshToken(CreatedAtModel, table=True):
    __tablename__ = "refresh_tokens"

    jti: str = Field(primary_key=True, max_length=64)
    user_id: int = Field(foreign_key="users.id", index=True)
    expires_at: datetime = Field(nullable=False)


__all__ = ["RefreshToken"]
