"""
Alembic migration environment for the job board schema.
The database URL comes from Settings (DATABASE_URL / backend/.env), never from an ini file.
"""
import sys
from logging.config import fileConfig
from pathlib import Path

# Project root (parent of backend/) must be importable as "backend"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from alembic import context
from sqlalchemy import create_engine, pool

from backend.app.core.config import settings
from backend.app.db.base import Base

# Register every model on Base.metadata
import backend.app.models  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# SQLite cannot ALTER most columns in place
_BATCH = settings.database_url.startswith("sqlite")


def run_migrations_offline() -> None:
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=_BATCH,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(settings.database_url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=_BATCH,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
