from __future__ import annotations

import os
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from dotenv import load_dotenv

# Make the arenadraw package importable and pick up DB_URL from .env
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))
load_dotenv(ROOT_DIR / ".env")

from arenadraw.db.engine import DEFAULT_SQLITE_URL, make_engine  # noqa: E402
from arenadraw.db.utils import resolve_sqlite_url  # noqa: E402
from arenadraw.models import Base  # noqa: E402 - import registers ProgressEntry

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

env_url = os.getenv("DB_URL")
CACHE_DB_URL = resolve_sqlite_url(env_url, ROOT_DIR) if env_url else DEFAULT_SQLITE_URL
# ConfigParser interpolation treats '%' specially.
config.set_main_option("sqlalchemy.url", CACHE_DB_URL.replace("%", "%%"))


def run_migrations_offline() -> None:
    """Emit the cache schema as SQL without connecting."""
    context.configure(
        url=CACHE_DB_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations against the configured cache database."""
    engine = make_engine(database_url=CACHE_DB_URL)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
