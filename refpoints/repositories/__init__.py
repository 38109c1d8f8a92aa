"""Репозитории для работы с БД."""

from .earning_repo import (
    add_earning,
    add_game_transaction,
    add_referral_earning,
    list_earnings,
    list_referral_earnings,
    referral_points_by_pair,
    sum_player_points,
    sum_referral_points,
)
from .referral_repo import (
    add_referral_link,
    list_all_links_with_email,
    list_links_with_email,
)
from .settings_repo import get_platform_settings, save_platform_settings
from .token_repo import (
    add_refresh_token,
    consume_refresh_token,
    delete_refresh_token,
    get_refresh_token,
    purge_expired_tokens,
)
from .user_repo import (
    add_user,
    find_taken_codes,
    get_user_by_email,
    get_user_by_id,
    get_user_by_ref_code,
    set_balance,
)

__all__ = [
    "add_earning",
    "add_game_transaction",
    "add_referral_earning",
    "add_referral_link",
    "add_refresh_token",
    "consume_refresh_token",
    "add_user",
    "delete_refresh_token",
    "find_taken_codes",
    "get_platform_settings",
    "get_refresh_token",
    "get_user_by_email",
    "get_user_by_id",
    "get_user_by_ref_code",
    "list_all_links_with_email",
    "list_earnings",
    "list_links_with_email",
    "list_referral_earnings",
    "purge_expired_tokens",
    "referral_points_by_pair",
    "save_platform_settings",
    "set_balance",
    "sum_player_points",
    "sum_referral_points",
]
