"""Бизнес-логика refpoints."""
