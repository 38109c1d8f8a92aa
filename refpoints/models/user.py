"""SQLModel модель пользователя."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field

from .base import CreatedAtModel


class User(CreatedAtModel, table=True):
    """Учётная запись участника программы.

    ``balance`` лишь кеш сумм по журналам (см. LedgerService.recompute_balance),
    ``referred_by`` задаётся при регистрации и больше не меняется.
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(max_length=254, unique=True, index=True)
    password_hash: str = Field(max_length=128)
    referral_code: Optional[str] = Field(
        default=None,
        max_length=32,
        index=True,
        unique=True,
    )
    referred_by: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    balance: float = Field(default=0.0)


__all__ = ["User"]
