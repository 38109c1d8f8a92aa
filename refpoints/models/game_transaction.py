"""Аудит сыгранных партий."""

from __future__ import annotations

from enum import Enum
from uuid import uuid4

from sqlmodel import Field

from .base import CreatedAtModel


class GameOutcome(str, Enum):
    WIN = "win"
    LOSE = "lose"


class GameTransaction(CreatedAtModel, table=True):
    __tablename__ = "game_transactions"

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True, max_length=32)
    user_id: int = Field(foreign_key="users.id", index=True)
    game_name: str = Field(default="default", max_length=64)
    outcome: str = Field(max_length=8, index=True)
    points_spent: float
    platform_earnings: float = Field(default=0.0)
    referrer_earnings: float = Field(default=0.0)


__all__ = ["GameOutcome", "GameTransaction"]
