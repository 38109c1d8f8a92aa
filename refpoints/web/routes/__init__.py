"""HTTP-маршруты refpoints."""

from __future__ import annotations

from .auth import router as auth_router
from .cms import router as cms_router
from .game import router as game_router
from .referral import router as referral_router

routers = (auth_router, referral_router, game_router, cms_router)

__all__ = ["routers"]
