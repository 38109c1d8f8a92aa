"""Entry point for refpoints API."""

from __future__ import annotations

import uvicorn
from loguru import logger

from config.settings import get_settings

from .logging_config import setup_logging


def main() -> None:
    settings = get_settings()
    setup_logging(json=settings.log_json, level=settings.log_level, log_file=settings.log_file)
    logger.info(
        "Запуск uvicorn на {host}:{port} ({env})",
        host=settings.server.host,
        port=settings.server.port,
        env=settings.environment,
    )
    uvicorn.run(
        "refpoints.web.app:app",
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )
    logger.info("uvicorn остановлен")


if __name__ == "__main__":
    main()
