"""
Alembic environment.

Migrations run synchronously against settings.DATABASE_URL_SYNC (for
MySQL, the pymysql URL matching the aiomysql one the application uses).
The target metadata is SQLModel.metadata with every reviewbox model
imported, so autogenerate sees the full schema.
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from sqlmodel import SQLModel

from alembic import context
from reviewbox import models  # noqa: F401
from reviewbox.config import settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

if not settings.DATABASE_URL_SYNC:
    raise RuntimeError("DATABASE_URL_SYNC must be set to run migrations")

config.set_main_option("sqlalchemy.url", settings.DATABASE_URL_SYNC)

target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of running it against a connection."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
