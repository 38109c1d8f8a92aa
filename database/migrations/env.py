"""Alembic environment для refpoints."""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlmodel import SQLModel

from config.settings import get_settings
from refpoints import models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Миграции выполняются синхронным драйвером.
_ASYNC_DRIVERS = {"+aiosqlite": "", "+asyncpg": "+psycopg2"}


def sync_dsn(dsn: str) -> str:
    for driver, replacement in _ASYNC_DRIVERS.items():
        dsn = dsn.replace(driver, replacement)
    return dsn


settings = get_settings()
config.set_main_option("sqlalchemy.url", sync_dsn(settings.database.dsn))

target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
