"""Настройка loguru: консоль и необязательный файл с ротацией."""

from __future__ import annotations

import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | {message}"
)


def setup_logging(
    json: bool = False,
    level: str = "INFO",
    log_file: str | None = None,
) -> None:
    """Заменяет стандартный sink loguru.

    В режиме ``json`` каждая запись сериализуется loguru целиком (вместе с
    ``extra``), что удобно для сборщиков логов.
    """

    logger.remove()
    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT if not json else "{message}",
        level=level.upper(),
        colorize=not json,
        serialize=json,
        backtrace=False,
        enqueue=True,
    )
    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            level=level.upper(),
            encoding="utf-8",
            serialize=json,
            enqueue=True,
        )


__all__ = ["setup_logging"]
