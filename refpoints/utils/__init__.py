"""Вспомогательные утилиты refpoints."""
