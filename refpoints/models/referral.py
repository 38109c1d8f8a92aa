"""Таблица реферальных связей."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field

from .base import CreatedAtModel


class ReferralLink(CreatedAtModel, table=True):
    __tablename__ = "referrals"

    id: Optional[int] = Field(default=None, primary_key=True)
    referrer_id: int = Field(foreign_key="users.id", index=True)
    referred_id: int = Field(foreign_key="users.id", unique=True, index=True)
    signup_bonus: float = Field(default=100.0)


__all__ = ["ReferralLink"]
