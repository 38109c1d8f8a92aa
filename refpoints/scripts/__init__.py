"""Служебные скрипты refpoints."""
