"""SQLModel сущности refpoints."""

from .earning import Earning, EarningType, ReferralEarning, ReferralEarningType  # noqa: F401
from .game_transaction import GameOutcome, GameTransaction  # noqa: F401
from .referral import ReferralLink  # noqa: F401
from .refresh_token import RefreshToken  # noqa: F401
from .settings import SETTINGS_ROW_ID, PlatformSettings  # noqa: F401
from .user import User  # noqa: F401

__all__ = [
    "Earning",
    "EarningType",
    "GameOutcome",
    "GameTransaction",
    "PlatformSettings",
    "ReferralEarning",
    "ReferralEarningType",
    "ReferralLink",
    "RefreshToken",
    "SETTINGS_ROW_ID",
    "User",
]
