"""FastAPI-приложение реферальной программы refpoints."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from config.settings import get_settings
from refpoints.db import engine, init_db
from refpoints.web.errors import register_exception_handlers
from refpoints.web.routes import routers

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.is_production:
        # В проде схему ведёт Alembic.
        await init_db()
        logger.info("Таблицы созданы (dev)")
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    application = FastAPI(title="refpoints API", lifespan=lifespan)
    register_exception_handlers(application)
    for router in routers:
        application.include_router(router)

    @application.get("/health")
    async def health() -> dict:
        """Проверка доступности сервиса."""
        return {"status": "ok", "service": "refpoints", "environment": settings.environment}

    return application


app = create_app()

__all__ = ["app", "create_app"]
