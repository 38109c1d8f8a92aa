"""Расчёт реферальной комиссии.

Проценты применяются последовательно: сначала доля платформы от ставки,
затем доля реферера от доли платформы.
"""

from __future__ import annotations


def platform_cut(stake: float, platform_pct: float) -> float:
    return stake * platform_pct / 100


def calculate_commission(stake: float, platform_pct: float, referral_pct: float) -> float:
    """Сколько очков получает реферер с проигранной ставки."""

    return platform_cut(stake, platform_pct) * referral_pct / 100


__all__ = ["calculate_commission", "platform_cut"]
